"""Classifier shared types.

The dispatcher operates on these types exclusively; the backing classifier
implementation converts whatever it parses into :class:`Command` values.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class CommandCategory(str, enum.Enum):
    """How the dispatcher treats a command kind."""

    INTROSPECTIVE = "introspective"
    MUTATING = "mutating"
    CONFIG = "config"
    EXPLAIN = "explain"
    UNSUPPORTED = "unsupported"


class CommandKind(enum.Enum):
    """Closed set of statement kinds the router understands.

    Each member carries its dispatch category and its operand arity as
    ``(label, category, min_operands, max_operands)``; the
    label keeps every value distinct so no two members alias each other.
    """

    USE = ("USE", CommandCategory.INTROSPECTIVE, 1, 1)
    USE_CATALOG = ("USE CATALOG", CommandCategory.INTROSPECTIVE, 1, 1)
    SHOW_CATALOGS = ("SHOW CATALOGS", CommandCategory.INTROSPECTIVE, 0, 0)
    SHOW_CURRENT_CATALOG = ("SHOW CURRENT CATALOG", CommandCategory.INTROSPECTIVE, 0, 0)
    SHOW_DATABASES = ("SHOW DATABASES", CommandCategory.INTROSPECTIVE, 0, 0)
    SHOW_CURRENT_DATABASE = ("SHOW CURRENT DATABASE", CommandCategory.INTROSPECTIVE, 0, 0)
    SHOW_TABLES = ("SHOW TABLES", CommandCategory.INTROSPECTIVE, 0, 0)
    SHOW_FUNCTIONS = ("SHOW FUNCTIONS", CommandCategory.INTROSPECTIVE, 0, 0)
    SHOW_MODULES = ("SHOW MODULES", CommandCategory.INTROSPECTIVE, 0, 0)
    DESC = ("DESC", CommandCategory.INTROSPECTIVE, 1, 1)
    DESCRIBE = ("DESCRIBE", CommandCategory.INTROSPECTIVE, 1, 1)

    SET = ("SET", CommandCategory.CONFIG, 1, 2)
    RESET = ("RESET", CommandCategory.CONFIG, 1, 1)

    EXPLAIN = ("EXPLAIN", CommandCategory.EXPLAIN, 0, 1)

    INSERT_INTO = ("INSERT INTO", CommandCategory.MUTATING, 1, 1)
    INSERT_OVERWRITE = ("INSERT OVERWRITE", CommandCategory.MUTATING, 1, 1)
    CREATE_FUNCTION = ("CREATE FUNCTION", CommandCategory.MUTATING, 1, 1)
    DROP_FUNCTION = ("DROP FUNCTION", CommandCategory.MUTATING, 1, 1)
    ALTER_FUNCTION = ("ALTER FUNCTION", CommandCategory.MUTATING, 1, 1)
    CREATE_CATALOG = ("CREATE CATALOG", CommandCategory.MUTATING, 1, 1)
    DROP_CATALOG = ("DROP CATALOG", CommandCategory.MUTATING, 1, 1)
    CREATE_TABLE = ("CREATE TABLE", CommandCategory.MUTATING, 1, 1)
    DROP_TABLE = ("DROP TABLE", CommandCategory.MUTATING, 1, 1)
    ALTER_TABLE = ("ALTER TABLE", CommandCategory.MUTATING, 1, 1)
    CREATE_VIEW = ("CREATE VIEW", CommandCategory.MUTATING, 1, 1)
    DROP_VIEW = ("DROP VIEW", CommandCategory.MUTATING, 1, 1)
    CREATE_DATABASE = ("CREATE DATABASE", CommandCategory.MUTATING, 1, 1)
    DROP_DATABASE = ("DROP DATABASE", CommandCategory.MUTATING, 1, 1)
    ALTER_DATABASE = ("ALTER DATABASE", CommandCategory.MUTATING, 1, 1)

    SELECT = ("SELECT", CommandCategory.UNSUPPORTED, 0, 1)
    UNKNOWN = ("UNKNOWN", CommandCategory.UNSUPPORTED, 0, 1)

    def __init__(self, label: str, category: CommandCategory, min_operands: int, max_operands: int) -> None:
        self.label = label
        self.category = category
        self.min_operands = min_operands
        self.max_operands = max_operands

    @property
    def is_mutating(self) -> bool:
        return self.category is CommandCategory.MUTATING


@dataclass(frozen=True, slots=True)
class Command:
    """A classified SQL statement.

    Immutable.  ``operands`` holds the extracted arguments in position
    order; ``statement`` is the statement text exactly as written (without
    the trailing semicolon).
    """

    kind: CommandKind
    operands: tuple[str, ...] = ()
    statement: str = ""

    def operand(self, index: int) -> str | None:
        """Return the operand at *index*, or ``None`` if absent."""
        if 0 <= index < len(self.operands):
            return self.operands[index]
        return None

    def __str__(self) -> str:
        return f"{self.kind.label}: {' '.join(self.operands)}".rstrip(": ")


class ClassifierError(Exception):
    """Raised when SQL text cannot be split into statements."""

    def __init__(self, sql_fragment: str, reason: str) -> None:
        self.sql_fragment = sql_fragment
        self.reason = reason
        super().__init__(f"Failed to classify SQL: {reason}")
