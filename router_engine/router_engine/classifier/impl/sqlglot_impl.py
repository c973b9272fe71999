"""SQLGlot-backed implementation of the classifier protocol.

This is the only classifier module that imports ``sqlglot``; the dispatcher
sees nothing but :class:`Command` values.

Statements are split on semicolon *tokens* rather than on raw ``;``
characters, so semicolons inside string literals, quoted identifiers and
comments never split a statement.  Each statement is then matched against an
ordered table of patterns; the first match decides its :class:`CommandKind`
and which parts of the text become operands.  Matching runs on the
statement rebuilt from its tokens, so comments inside a statement never
leak into an operand.  Identifier operands may be bare or quoted with
backticks, double quotes or single quotes; the quotes are stripped.

The patterns deliberately accept the table-environment dialect (``USE
CATALOG``, ``SHOW CURRENT DATABASE``, ``SET key value``) that no SQL
grammar in SQLGlot parses, which is why classification is pattern-based and
only splitting relies on the tokenizer.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from sqlglot.dialects.dialect import Dialect as SqlGlotDialect
from sqlglot.tokens import Token, TokenType

from .._types import ClassifierError, Command, CommandKind

logger = logging.getLogger(__name__)

# Spark's tokenizer understands backtick identifiers and ``--``/``/* */``
# comments, which covers the table-environment syntax.
_TOKENIZER_DIALECT = "spark"

_FLAGS = re.IGNORECASE | re.DOTALL

_QUOTES = ("`", "'", '"')


def _whole_statement(match: re.Match[str], statement: str) -> tuple[str, ...]:
    return (statement,)


def _groups(match: re.Match[str], statement: str) -> tuple[str, ...]:
    return tuple(_unquote(g) for g in match.groups() if g is not None and g.strip())


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        quote = value[0]
        return value[1:-1].replace(quote * 2, quote)
    return value


@dataclass(frozen=True, slots=True)
class _Rule:
    kind: CommandKind
    pattern: re.Pattern[str]
    operands: Callable[[re.Match[str], str], tuple[str, ...]]


def _rule(
    kind: CommandKind,
    pattern: str,
    operands: Callable[[re.Match[str], str], tuple[str, ...]] = _whole_statement,
) -> _Rule:
    return _Rule(kind=kind, pattern=re.compile(pattern, _FLAGS), operands=operands)


_OPT_TEMPORARY = r"(?:TEMPORARY\s+(?:SYSTEM\s+)?|TEMP\s+)?"
_QUOTED_OR_BARE = r"('[^']*'|\"[^\"]*\"|[^\s=]+)"
_IDENTIFIER = r"(`(?:[^`]|``)*`|\"(?:[^\"]|\"\")*\"|'(?:[^']|'')*'|[^\s`\"']+)"
# A CTE list ends at its last closing parenthesis, before the main verb.
_OPT_WITH = r"(?:WITH\b.*\)\s*)?"

# Order matters: the first matching rule wins.
_RULES: tuple[_Rule, ...] = (
    _rule(CommandKind.INSERT_INTO, rf"{_OPT_WITH}INSERT\s+INTO\b.*"),
    _rule(CommandKind.INSERT_OVERWRITE, rf"{_OPT_WITH}INSERT\s+OVERWRITE\b.*"),
    _rule(CommandKind.SELECT, r"(?:WITH\b.*\bSELECT\b.*|SELECT\b.*|VALUES\b.*)"),
    _rule(CommandKind.CREATE_FUNCTION, rf"CREATE\s+(?:OR\s+REPLACE\s+)?{_OPT_TEMPORARY}(?:FUNCTION|MACRO)\b.*"),
    _rule(CommandKind.DROP_FUNCTION, rf"DROP\s+{_OPT_TEMPORARY}(?:FUNCTION|MACRO)\b.*"),
    _rule(CommandKind.ALTER_FUNCTION, rf"ALTER\s+{_OPT_TEMPORARY}FUNCTION\b.*"),
    _rule(CommandKind.CREATE_CATALOG, r"CREATE\s+CATALOG\b.*"),
    _rule(CommandKind.DROP_CATALOG, r"DROP\s+CATALOG\b.*"),
    _rule(CommandKind.CREATE_TABLE, rf"CREATE\s+(?:OR\s+REPLACE\s+)?{_OPT_TEMPORARY}TABLE\b.*"),
    _rule(CommandKind.DROP_TABLE, rf"DROP\s+{_OPT_TEMPORARY}TABLE\b.*"),
    _rule(CommandKind.ALTER_TABLE, r"ALTER\s+TABLE\b.*"),
    _rule(CommandKind.CREATE_VIEW, rf"CREATE\s+(?:OR\s+REPLACE\s+)?{_OPT_TEMPORARY}VIEW\b.*"),
    _rule(CommandKind.DROP_VIEW, rf"DROP\s+{_OPT_TEMPORARY}VIEW\b.*"),
    _rule(CommandKind.CREATE_DATABASE, r"CREATE\s+(?:DATABASE|SCHEMA)\b.*"),
    _rule(CommandKind.DROP_DATABASE, r"DROP\s+(?:DATABASE|SCHEMA)\b.*"),
    _rule(CommandKind.ALTER_DATABASE, r"ALTER\s+(?:DATABASE|SCHEMA)\b.*"),
    # Without a name, "USE CATALOG" switches to a database called CATALOG.
    _rule(CommandKind.USE_CATALOG, rf"USE\s+CATALOG\s+{_IDENTIFIER}", _groups),
    _rule(CommandKind.USE, rf"USE(?:\s+{_IDENTIFIER})?", _groups),
    _rule(CommandKind.SHOW_CATALOGS, r"SHOW\s+CATALOGS", _groups),
    _rule(CommandKind.SHOW_CURRENT_CATALOG, r"SHOW\s+CURRENT\s+CATALOG", _groups),
    _rule(CommandKind.SHOW_DATABASES, r"SHOW\s+(?:DATABASES|SCHEMAS)", _groups),
    _rule(CommandKind.SHOW_CURRENT_DATABASE, r"SHOW\s+CURRENT\s+(?:DATABASE|SCHEMA)", _groups),
    _rule(CommandKind.SHOW_TABLES, r"SHOW\s+TABLES", _groups),
    _rule(CommandKind.SHOW_FUNCTIONS, r"SHOW\s+(?:USER\s+)?FUNCTIONS", _groups),
    _rule(CommandKind.SHOW_MODULES, r"SHOW\s+(?:FULL\s+)?MODULES", _groups),
    _rule(CommandKind.DESCRIBE, r"DESCRIBE(?:\s+(.+))?", _groups),
    _rule(CommandKind.DESC, r"DESC(?:\s+(.+))?", _groups),
    _rule(CommandKind.EXPLAIN, r"EXPLAIN\b.*"),
    _rule(CommandKind.SET, rf"SET(?:\s+{_QUOTED_OR_BARE}(?:\s*=\s*|\s+|$)(.*))?", _groups),
    _rule(CommandKind.RESET, rf"RESET(?:\s+{_QUOTED_OR_BARE})?", _groups),
)


class SqlGlotClassifier:
    """Classify SQL scripts using the SQLGlot tokenizer for splitting."""

    def __init__(self, tokenizer_dialect: str = _TOKENIZER_DIALECT) -> None:
        self._dialect = SqlGlotDialect.get_or_raise(tokenizer_dialect)
        self.tokenizer_dialect = tokenizer_dialect

    def classify(self, sql: str) -> list[Command]:
        commands = [self.classify_statement(stmt, text) for stmt, text in self._split(sql)]
        logger.debug("Classified %d statement(s)", len(commands))
        return commands

    def split_statements(self, sql: str) -> list[str]:
        """Split *sql* on top-level semicolons, dropping empty statements."""
        return [statement for statement, _ in self._split(sql)]

    def _split(self, sql: str) -> list[tuple[str, str]]:
        """Return ``(statement, comment-free text)`` pairs in source order."""
        try:
            tokens = self._dialect.tokenize(sql)
        except Exception as exc:
            raise ClassifierError(sql[:200], str(exc)) from exc

        statements: list[tuple[str, str]] = []
        current: list[Token] = []
        for token in tokens:
            if token.token_type == TokenType.SEMICOLON:
                self._flush(sql, current, statements)
                current = []
            else:
                current.append(token)
        self._flush(sql, current, statements)
        return statements

    @staticmethod
    def _flush(sql: str, tokens: list[Token], statements: list[tuple[str, str]]) -> None:
        if not tokens:
            return
        statement = sql[tokens[0].start : tokens[-1].end + 1].strip()
        if statement:
            statements.append((statement, _without_comments(sql, tokens)))

    @staticmethod
    def classify_statement(statement: str, text: str | None = None) -> Command:
        """Classify a single statement (no trailing semicolon).

        *text* is the statement with its comments removed; when omitted the
        statement is matched as given.
        """
        statement = statement.strip()
        text = statement if text is None else text.strip()
        for rule in _RULES:
            match = rule.pattern.fullmatch(text)
            if match is not None:
                return Command(kind=rule.kind, operands=rule.operands(match, statement), statement=statement)
        return Command(kind=CommandKind.UNKNOWN, operands=(statement,), statement=statement)


def _without_comments(sql: str, tokens: list[Token]) -> str:
    """Rebuild the text spanned by *tokens*, replacing each comment gap with a space."""
    parts = [sql[tokens[0].start : tokens[0].end + 1]]
    for previous, token in zip(tokens, tokens[1:]):
        gap = sql[previous.end + 1 : token.start]
        parts.append(gap if not gap or gap.isspace() else " ")
        parts.append(sql[token.start : token.end + 1])
    return "".join(parts)
