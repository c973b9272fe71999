"""Command dispatcher -- routes classified SQL commands to an execution context.

A call to :meth:`SqlRouter.execute` resolves the script text from the job
parameters, classifies it, and runs the resulting commands strictly in
order.  Each command kind has one handler:

* introspective commands (``USE``, ``SHOW ...``, ``DESC``) query or switch
  the context and push formatted text to the caller's callback;
* config commands (``SET``, ``RESET``) validate against the option registry
  and update the context's configuration store;
* mutating commands (DDL and ``INSERT``) run under the router's mutation
  lock, so at most one of them reaches a backend through this router at a
  time;
* ``SELECT`` and anything unrecognised are rejected.

The first failing command stops the script.  Commands that already ran keep
their effects.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import TypeVar

from router_engine.classifier import (
    ClassifierError,
    Command,
    CommandCategory,
    CommandKind,
    SqlClassifier,
    get_classifier,
)
from router_engine.config import Settings, load_settings
from router_engine.context.base import ExecutionContext
from router_engine.context.types import SqlDialect
from router_engine.errors import (
    BackendFailure,
    InvalidConfigKeyError,
    RouterError,
    UnsupportedOperation,
    ValidationFailure,
)
from router_engine.options import SQL_DIALECT, OptionRegistry, get_option_registry
from router_engine.params import ParameterSet
from router_engine.router.result import CommandOutcome, RouterResult, RouterStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

OutputCallback = Callable[[str], None]
_Handler = Callable[[Command, ExecutionContext, OutputCallback], "str | None"]

_RESET_ALL = "ALL"


class SqlRouter:
    """Route SQL scripts to an :class:`ExecutionContext`.

    One router may serve many contexts and many threads.  Its mutation lock
    is per router, not per context: two contexts sharing a router also share
    DDL serialization.

    Parameters
    ----------
    classifier:
        Statement classifier.  Defaults to the shared classifier that
        :func:`get_classifier` selects from *settings*.
    registry:
        Option registry used to validate ``SET``.  Defaults to the
        process-wide :func:`get_option_registry`.
    settings:
        Router settings.  Defaults to :func:`load_settings`.
    """

    def __init__(
        self,
        classifier: SqlClassifier | None = None,
        registry: OptionRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._classifier = classifier
        self._registry = registry
        self._settings = settings or load_settings()
        self._mutation_lock = threading.Lock()
        self._handlers: dict[CommandKind, _Handler] = {
            CommandKind.USE: self._use,
            CommandKind.USE_CATALOG: self._use_catalog,
            CommandKind.SHOW_CATALOGS: self._show_catalogs,
            CommandKind.SHOW_CURRENT_CATALOG: self._show_current_catalog,
            CommandKind.SHOW_DATABASES: self._show_databases,
            CommandKind.SHOW_CURRENT_DATABASE: self._show_current_database,
            CommandKind.SHOW_TABLES: self._show_tables,
            CommandKind.SHOW_FUNCTIONS: self._show_functions,
            CommandKind.SHOW_MODULES: self._show_modules,
            CommandKind.SET: self._set,
            CommandKind.RESET: self._reset,
            CommandKind.DESC: self._describe,
            CommandKind.DESCRIBE: self._describe,
            CommandKind.EXPLAIN: self._explain,
        }
        for kind in CommandKind:
            if kind.is_mutating:
                self._handlers[kind] = self._mutate

    @property
    def classifier(self) -> SqlClassifier:
        if self._classifier is None:
            self._classifier = get_classifier(self._settings)
        return self._classifier

    @property
    def registry(self) -> OptionRegistry:
        if self._registry is None:
            self._registry = get_option_registry()
        return self._registry

    # -- Entry point ----------------------------------------------------------

    def execute(
        self,
        sql_or_key: str | None,
        params: Mapping[str, str],
        context: ExecutionContext,
        callback: OutputCallback,
    ) -> RouterResult:
        """Run every statement of a script against *context*.

        Parameters
        ----------
        sql_or_key:
            Name of the parameter holding the script.  ``None`` or empty
            means the well-known key from ``Settings.sql_param_key``.
        params:
            Job parameters to resolve the script from.
        context:
            Backend the commands are executed against.
        callback:
            Receives the formatted output of each introspective command.

        Returns
        -------
        RouterResult
            ``SUCCESS`` with one outcome per command, or ``FAIL`` carrying
            a :class:`ValidationFailure`, :class:`UnsupportedOperation` or
            :class:`BackendFailure`.
        """
        try:
            sql = self._resolve_sql(sql_or_key, params)
            commands = self._classify(sql)
        except RouterError as exc:
            logger.error("Rejected SQL script: %s", exc)
            return RouterResult.failure(exc)

        completed: list[CommandOutcome] = []
        for index, command in enumerate(commands):
            try:
                output = self.dispatch(command, context, callback)
            except RouterError as exc:
                logger.error(
                    "%s failed: %s",
                    command.kind.label,
                    exc,
                    extra={"command": command.kind.name, "statement_index": index},
                )
                return RouterResult.failure(
                    exc,
                    commands_total=len(commands),
                    completed=completed,
                    failed_index=index,
                )
            completed.append(
                CommandOutcome(index=index, kind=command.kind, statement=command.statement, output=output)
            )

        logger.debug("Executed SQL script (%d statements):\n%s", len(commands), sql)
        return RouterResult(
            status=RouterStatus.SUCCESS,
            commands_total=len(commands),
            completed=completed,
        )

    def dispatch(
        self,
        command: Command,
        context: ExecutionContext,
        callback: OutputCallback,
    ) -> str | None:
        """Validate and run a single command; return the callback payload, if any.

        Raises
        ------
        RouterError
            If the command is unsupported, malformed, or the backend fails.
        """
        if command.kind.category is CommandCategory.UNSUPPORTED:
            if command.kind is CommandKind.SELECT:
                raise UnsupportedOperation(
                    f"Unsupported select operation: {command.statement}",
                    statement=command.statement,
                )
            raise UnsupportedOperation(
                f"Unsupported command: {command.statement or command.kind.label}",
                statement=command.statement,
            )

        self._check_arity(command)
        handler = self._handlers.get(command.kind)
        if handler is None:
            raise UnsupportedOperation(f"Unsupported command: {command.kind.label}", statement=command.statement)
        return handler(command, context, callback)

    # -- Validation -----------------------------------------------------------

    def _resolve_sql(self, sql_or_key: str | None, params: Mapping[str, str]) -> str:
        key = sql_or_key if sql_or_key else self._settings.sql_param_key
        if isinstance(params, ParameterSet) and params.has_flag(key):
            sql = None
        else:
            sql = params.get(key)
        if sql is None or not sql.strip():
            raise ValidationFailure(f"sql is empty (parameter '{key}')", statement=sql_or_key)
        return sql

    def _classify(self, sql: str) -> list[Command]:
        try:
            return self.classifier.classify(sql)
        except ClassifierError as exc:
            raise ValidationFailure(str(exc), statement=exc.sql_fragment) from exc

    @staticmethod
    def _check_arity(command: Command) -> None:
        kind = command.kind
        count = len(command.operands)
        if count < kind.min_operands:
            raise ValidationFailure(
                f"{kind.label} requires at least {kind.min_operands} operand(s), got {count}",
                statement=command.statement,
            )
        if count > kind.max_operands:
            raise ValidationFailure(
                f"{kind.label} accepts at most {kind.max_operands} operand(s), got {count}",
                statement=command.statement,
            )
        if any(not operand.strip() for operand in command.operands[: kind.min_operands]):
            raise ValidationFailure(f"{kind.label} has a blank operand", statement=command.statement)

    @staticmethod
    def _backend(command: Command, fn: Callable[..., T], *args: object) -> T:
        """Call *fn* on the backend, converting any failure to :class:`BackendFailure`."""
        try:
            return fn(*args)
        except RouterError:
            raise
        except Exception as exc:
            raise BackendFailure(
                f"{command.kind.label} failed in the execution backend",
                statement=command.statement,
                cause=exc,
            ) from exc

    @staticmethod
    def _log(command: Command, detail: str) -> None:
        logger.info("%s: %s", command.kind.label, detail, extra={"command": command.kind.name})

    # -- Introspective commands -----------------------------------------------

    def _use(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> None:
        database = command.operands[0]
        self._backend(command, context.use_database, database)
        self._log(command, database)

    def _use_catalog(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> None:
        catalog = command.operands[0]
        self._backend(command, context.use_catalog, catalog)
        self._log(command, catalog)

    @staticmethod
    def _emit(callback: OutputCallback, header: str, lines: list[str]) -> str:
        output = "\n".join([header, *lines])
        callback(output)
        return output

    def _show_catalogs(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str:
        return self._emit(callback, "%show catalog", self._backend(command, context.list_catalogs))

    def _show_current_catalog(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str:
        return self._emit(callback, "%show current catalog", [self._backend(command, context.get_current_catalog)])

    def _show_databases(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str:
        return self._emit(callback, "%show databases", self._backend(command, context.list_databases))

    def _show_current_database(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str:
        return self._emit(callback, "%show current database", [self._backend(command, context.get_current_database)])

    def _show_tables(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str:
        prefix = self._settings.unnamed_table_prefix
        tables = [t for t in self._backend(command, context.list_tables) if not t.startswith(prefix)]
        return self._emit(callback, "%show tables", tables)

    def _show_functions(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str:
        return self._emit(callback, "%table function", self._backend(command, context.list_user_defined_functions))

    def _show_modules(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str:
        return self._emit(callback, "%show modules", self._backend(command, context.list_modules))

    def _describe(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str:
        schema = self._backend(command, context.scan, command.operands[0])
        lines = ["Column\tType\n"]
        for i in range(schema.field_count):
            lines.append(f"{schema.field_name(i)}\t{schema.field_data_type(i)}\n")
        output = "".join(lines)
        callback(output)
        return output

    def _explain(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str:
        statement = command.statement or command.operand(0) or ""
        if not statement.strip():
            raise ValidationFailure("EXPLAIN has no statement to explain", statement=command.statement)
        result = self._backend(command, context.execute_sql, statement)
        first = next(result.collect(), None)
        if not first:
            raise BackendFailure("EXPLAIN returned no plan", statement=statement)
        output = str(first[0])
        callback(output)
        return output

    # -- Config commands ------------------------------------------------------

    def _set(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> str | None:
        key = command.operands[0]
        option = self.registry.lookup(key)
        if option is None:
            raise InvalidConfigKeyError(key, statement=command.statement)

        value = command.operand(1)
        if value is None:
            if key.lower() == SQL_DIALECT.key:
                current = self._backend(command, context.get_sql_dialect).value
            else:
                current = context.configuration.get(key)
                if current is None:
                    current = "" if option.default_value is None else str(option.default_value)
            output = f"{key}={current}"
            callback(output)
            return output

        if key.lower() == SQL_DIALECT.key:
            dialect = SqlDialect.from_name(value)
            if dialect is None:
                supported = ", ".join(d.name for d in SqlDialect)
                raise ValidationFailure(
                    f"Unknown SQL dialect '{value}'; expected one of {supported}",
                    statement=command.statement,
                )
            self._backend(command, context.set_sql_dialect, dialect)
        else:
            context.configuration.set(key, value)
        self._log(command, f"{key} --> {value}")
        return None

    def _reset(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> None:
        key = command.operands[0]
        if key.upper() == _RESET_ALL:
            context.configuration.clear()
        else:
            context.configuration.remove(key)
        self._log(command, key)

    # -- Mutating commands ----------------------------------------------------

    def _mutate(self, command: Command, context: ExecutionContext, callback: OutputCallback) -> None:
        statement = command.operands[0]
        with self._mutation_lock:
            self._backend(command, context.execute_sql, statement)
        self._log(command, statement)
