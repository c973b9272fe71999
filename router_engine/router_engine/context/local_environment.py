"""Local DuckDB execution context for development and testing.

Provides a zero-infrastructure table environment on an embedded DuckDB
database.  Table-environment concepts map onto DuckDB as follows:

* catalog   -> attached DuckDB database (``memory`` for an in-memory one)
* database  -> schema inside the current DuckDB database
* function  -> non-internal function or macro (``CREATE FUNCTION``)
* module    -> loaded DuckDB extension

When the session dialect is :attr:`SqlDialect.HIVE`, statements are
transpiled from Hive to DuckDB with :mod:`sqlglot` before execution.

A single DuckDB connection carries the session state (current catalog and
schema), so every call is serialized on an internal lock.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Any

import duckdb
import sqlglot

from router_engine.context.configuration import ConfigurationStore
from router_engine.context.types import SqlDialect, TableResult, TableSchema
from router_engine.options.table import SQL_DIALECT

logger = logging.getLogger(__name__)

# DuckDB has schemas, not databases; rewrite the DDL verb accordingly.
_DATABASE_DDL_RE = re.compile(r"^\s*(CREATE|DROP|ALTER)\s+DATABASE\b", re.IGNORECASE)

# DuckDB's EXPLAIN yields (explain_key, explain_value); the plan text is the value.
_EXPLAIN_COLUMNS = ("explain_key", "explain_value")

_SYSTEM_SCHEMAS = ("information_schema", "pg_catalog")


def _quote_identifier(name: str) -> str:
    name = name.strip()
    if len(name) >= 2 and name[0] == name[-1] and name[0] in ("`", '"'):
        name = name[1:-1]
    return '"' + name.replace('"', '""') + '"'


class LocalTableEnvironment:
    """Execution context backed by an embedded DuckDB database.

    Parameters
    ----------
    db_path:
        DuckDB database file, or ``":memory:"`` (the default) for a
        throwaway in-process database.
    configuration:
        Optional pre-populated configuration store.
    """

    def __init__(
        self,
        db_path: str = ":memory:",
        configuration: ConfigurationStore | None = None,
    ) -> None:
        self._db_path = db_path
        self._configuration = configuration or ConfigurationStore()
        self._lock = threading.RLock()
        logger.info("Opening DuckDB database at %s", db_path)
        self._connection: duckdb.DuckDBPyConnection | None = duckdb.connect(database=db_path)

    # -- Connection management -----------------------------------------------

    def _conn(self) -> duckdb.DuckDBPyConnection:
        if self._connection is None:
            raise RuntimeError("LocalTableEnvironment is closed")
        return self._connection

    def close(self) -> None:
        """Close the DuckDB connection if it is open."""
        with self._lock:
            if self._connection is not None:
                try:
                    self._connection.close()
                except Exception:
                    logger.debug("Ignoring error while closing DuckDB connection")
                finally:
                    self._connection = None

    def __enter__(self) -> LocalTableEnvironment:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def _query_column(self, sql: str) -> list[str]:
        with self._lock:
            rows = self._conn().execute(sql).fetchall()
        return [str(row[0]) for row in rows]

    def _query_scalar(self, sql: str) -> str:
        with self._lock:
            row = self._conn().execute(sql).fetchone()
        if row is None:
            raise RuntimeError(f"Query returned no rows: {sql}")
        return str(row[0])

    # -- ExecutionContext implementation --------------------------------------

    @property
    def configuration(self) -> ConfigurationStore:
        return self._configuration

    def use_catalog(self, catalog: str) -> None:
        with self._lock:
            self._conn().execute(f"USE {_quote_identifier(catalog)}")

    def use_database(self, database: str) -> None:
        parts = [p for p in database.split(".") if p]
        if len(parts) == 2:
            catalog, schema = parts
        else:
            catalog, schema = self.get_current_catalog(), database
        with self._lock:
            self._conn().execute(f"USE {_quote_identifier(catalog)}.{_quote_identifier(schema)}")

    def list_catalogs(self) -> list[str]:
        return self._query_column(
            "SELECT database_name FROM duckdb_databases() WHERE NOT internal ORDER BY database_name"
        )

    def get_current_catalog(self) -> str:
        return self._query_scalar("SELECT current_database()")

    def list_databases(self) -> list[str]:
        excluded = ", ".join(f"'{s}'" for s in _SYSTEM_SCHEMAS)
        return self._query_column(
            "SELECT DISTINCT schema_name FROM information_schema.schemata "
            f"WHERE catalog_name = current_database() AND schema_name NOT IN ({excluded}) "
            "ORDER BY schema_name"
        )

    def get_current_database(self) -> str:
        return self._query_scalar("SELECT current_schema()")

    def list_tables(self) -> list[str]:
        return self._query_column(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_catalog = current_database() AND table_schema = current_schema() "
            "ORDER BY table_name"
        )

    def list_user_defined_functions(self) -> list[str]:
        return self._query_column(
            "SELECT DISTINCT function_name FROM duckdb_functions() WHERE NOT internal ORDER BY function_name"
        )

    def list_modules(self) -> list[str]:
        return self._query_column(
            "SELECT extension_name FROM duckdb_extensions() WHERE loaded ORDER BY extension_name"
        )

    def execute_sql(self, statement: str) -> TableResult:
        """Execute *statement* after dialect translation and return all rows."""
        translated = self._translate(statement)
        logger.debug("Executing on DuckDB: %s", translated)

        with self._lock:
            conn = self._conn()
            conn.execute(translated)
            description = conn.description
            rows: list[tuple[Any, ...]] = conn.fetchall() if description is not None else []

        columns = tuple(str(col[0]) for col in description or ())
        if columns == _EXPLAIN_COLUMNS:
            return TableResult(columns=("plan",), rows=tuple((row[1],) for row in rows))
        return TableResult(columns=columns, rows=tuple(tuple(row) for row in rows))

    def scan(self, table_name: str) -> TableSchema:
        with self._lock:
            relation = self._conn().table(table_name.strip())
            names = tuple(str(c) for c in relation.columns)
            types = tuple(str(t) for t in relation.types)
        return TableSchema(field_names=names, field_types=types)

    def get_sql_dialect(self) -> SqlDialect:
        value = self._configuration.get(SQL_DIALECT.key)
        if value is None:
            return SqlDialect.DEFAULT
        return SqlDialect.from_name(value) or SqlDialect.DEFAULT

    def set_sql_dialect(self, dialect: SqlDialect) -> None:
        self._configuration.set(SQL_DIALECT.key, dialect.value)

    # -- Internal helpers ----------------------------------------------------

    def _translate(self, statement: str) -> str:
        """Rewrite *statement* into DuckDB SQL for the session dialect."""
        sql = _DATABASE_DDL_RE.sub(lambda m: f"{m.group(1)} SCHEMA", statement, count=1)
        if self.get_sql_dialect() is SqlDialect.HIVE:
            translated = sqlglot.transpile(sql, read="hive", write="duckdb")
            sql = ";\n".join(translated)
        return sql
