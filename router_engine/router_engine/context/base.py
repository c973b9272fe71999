"""Abstract interface for table execution backends.

The router never owns a backend; it borrows one per call.  Any object that
exposes the methods below (duck typing) can be routed to, whether it wraps an
embedded DuckDB database or a remote table service.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from router_engine.context.configuration import ConfigurationStore
from router_engine.context.types import SqlDialect, TableResult, TableSchema


@runtime_checkable
class ExecutionContext(Protocol):
    """Structural interface for a live table/catalog backend.

    Implementations are **not** required to subclass this protocol.  All
    mutations must be visible to later calls on the same context, which may
    come from other threads.
    """

    @property
    def configuration(self) -> ConfigurationStore:
        """The context's session configuration."""
        ...

    def use_catalog(self, catalog: str) -> None:
        """Make *catalog* the current catalog."""
        ...

    def use_database(self, database: str) -> None:
        """Make *database* (in the current catalog) the current database."""
        ...

    def list_catalogs(self) -> list[str]: ...

    def get_current_catalog(self) -> str: ...

    def list_databases(self) -> list[str]:
        """Databases in the current catalog."""
        ...

    def get_current_database(self) -> str: ...

    def list_tables(self) -> list[str]:
        """Tables and views in the current database."""
        ...

    def list_user_defined_functions(self) -> list[str]: ...

    def list_modules(self) -> list[str]: ...

    def execute_sql(self, statement: str) -> TableResult:
        """Execute a single statement and return its materialised result.

        Parameters
        ----------
        statement:
            One SQL statement without a trailing semicolon.
        """
        ...

    def scan(self, table_name: str) -> TableSchema:
        """Resolve *table_name* (table or view) and return its schema."""
        ...

    def get_sql_dialect(self) -> SqlDialect: ...

    def set_sql_dialect(self, dialect: SqlDialect) -> None: ...
