"""Tests for router_engine.context.local_environment against a real in-memory DuckDB."""

from __future__ import annotations

import duckdb
import pytest

from router_engine.config import load_settings
from router_engine.context import ConfigurationStore, ExecutionContext, LocalTableEnvironment, SqlDialect
from router_engine.errors import BackendFailure
from router_engine.options import SQL_DIALECT
from router_engine.router import SqlRouter


@pytest.fixture()
def env():
    environment = LocalTableEnvironment()
    yield environment
    environment.close()


@pytest.fixture()
def router() -> SqlRouter:
    return SqlRouter(settings=load_settings())


class _Sink:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def __call__(self, text: str) -> None:
        self.calls.append(text)


# ---------------------------------------------------------------------------
# ExecutionContext surface
# ---------------------------------------------------------------------------


class TestLocalTableEnvironment:
    def test_satisfies_protocol(self, env):
        assert isinstance(env, ExecutionContext)

    def test_in_memory_catalog(self, env):
        assert env.get_current_catalog() == "memory"
        assert "memory" in env.list_catalogs()

    def test_default_database(self, env):
        assert env.get_current_database() == "main"
        assert "main" in env.list_databases()

    def test_create_database_maps_to_schema(self, env):
        env.execute_sql("CREATE DATABASE db1")
        assert "db1" in env.list_databases()

    def test_use_database(self, env):
        env.execute_sql("CREATE DATABASE db1")
        env.use_database("db1")
        assert env.get_current_database() == "db1"

    def test_use_qualified_database(self, env):
        env.execute_sql("CREATE SCHEMA db2")
        env.use_database("memory.db2")
        assert env.get_current_database() == "db2"

    def test_use_catalog(self, env):
        env.use_catalog("memory")
        assert env.get_current_catalog() == "memory"

    def test_use_missing_database_raises(self, env):
        with pytest.raises(duckdb.Error):
            env.use_database("nope")

    def test_list_tables_scoped_to_current_database(self, env):
        env.execute_sql("CREATE TABLE orders (id INTEGER)")
        env.execute_sql("CREATE SCHEMA other")
        env.execute_sql("CREATE TABLE other.hidden (id INTEGER)")
        assert env.list_tables() == ["orders"]

    def test_scan(self, env):
        env.execute_sql("CREATE TABLE orders (id INTEGER, name VARCHAR)")
        schema = env.scan("orders")
        assert schema.field_names == ("id", "name")
        assert schema.field_types == ("INTEGER", "VARCHAR")

    def test_scan_missing_table_raises(self, env):
        with pytest.raises(duckdb.Error):
            env.scan("missing")

    def test_execute_sql_returns_rows(self, env):
        env.execute_sql("CREATE TABLE t (a INTEGER)")
        env.execute_sql("INSERT INTO t VALUES (1), (2)")
        result = env.execute_sql("SELECT a FROM t ORDER BY a")
        assert result.columns == ("a",)
        assert list(result.collect()) == [(1,), (2,)]
        assert result.row_count == 2

    def test_explain_normalised_to_plan_column(self, env):
        result = env.execute_sql("EXPLAIN SELECT 1")
        assert result.columns == ("plan",)
        assert result.row_count >= 1
        assert isinstance(next(result.collect())[0], str)

    def test_user_defined_functions(self, env):
        env.execute_sql("CREATE MACRO add_one(x) AS x + 1")
        assert "add_one" in env.list_user_defined_functions()

    def test_list_modules(self, env):
        assert isinstance(env.list_modules(), list)

    def test_closed_environment_raises(self):
        environment = LocalTableEnvironment()
        environment.close()
        with pytest.raises(RuntimeError, match="closed"):
            environment.get_current_catalog()

    def test_context_manager_closes(self):
        with LocalTableEnvironment() as environment:
            assert environment.get_current_database() == "main"
        with pytest.raises(RuntimeError):
            environment.list_tables()


class TestDialect:
    def test_default_dialect(self, env):
        assert env.get_sql_dialect() is SqlDialect.DEFAULT

    def test_dialect_stored_in_configuration(self, env):
        env.set_sql_dialect(SqlDialect.HIVE)
        assert env.configuration.get(SQL_DIALECT.key) == "hive"
        assert env.get_sql_dialect() is SqlDialect.HIVE

    def test_clearing_configuration_restores_default(self, env):
        env.set_sql_dialect(SqlDialect.HIVE)
        env.configuration.clear()
        assert env.get_sql_dialect() is SqlDialect.DEFAULT

    def test_shared_configuration_store(self):
        store = ConfigurationStore({SQL_DIALECT.key: "hive"})
        with LocalTableEnvironment(configuration=store) as environment:
            assert environment.get_sql_dialect() is SqlDialect.HIVE

    def test_hive_statements_transpiled(self, env):
        env.set_sql_dialect(SqlDialect.HIVE)
        env.execute_sql("CREATE TABLE `events` (`id` INT, `name` STRING)")
        assert "events" in env.list_tables()
        assert env.scan("events").field_types == ("INTEGER", "VARCHAR")


# ---------------------------------------------------------------------------
# Router end to end
# ---------------------------------------------------------------------------


class TestRouterEndToEnd:
    def test_use_db1_switches_without_output(self, env, router):
        env.execute_sql("CREATE DATABASE db1")
        sink = _Sink()
        result = router.execute(None, {"sql": "USE db1"}, env, sink)
        assert result.ok
        assert sink.calls == []
        assert env.get_current_database() == "db1"

    def test_script(self, env, router):
        sql = """
            CREATE DATABASE db1;
            USE db1;
            CREATE TABLE orders (id INTEGER, name VARCHAR);
            INSERT INTO orders VALUES (1, 'a;b');
            SHOW TABLES;
            DESC orders;
            SHOW CURRENT DATABASE;
        """
        sink = _Sink()
        result = router.execute(None, {"sql": sql}, env, sink)
        assert result.ok, result.error
        assert sink.calls == [
            "%show tables\norders",
            "Column\tType\nid\tINTEGER\nname\tVARCHAR\n",
            "%show current database\ndb1",
        ]

    def test_show_tables_hides_unnamed(self, env, router):
        env.execute_sql('CREATE TABLE "UnnamedTable$0" (a INTEGER)')
        env.execute_sql("CREATE TABLE visible (a INTEGER)")
        sink = _Sink()
        router.execute(None, {"sql": "SHOW TABLES"}, env, sink)
        assert sink.calls == ["%show tables\nvisible"]

    def test_dialect_round_trip(self, env, router):
        result = router.execute(None, {"sql": "SET table.sql-dialect = hive"}, env, _Sink())
        assert result.ok
        assert env.get_sql_dialect() is SqlDialect.HIVE

        result = router.execute(None, {"sql": "SET table.sql-dialect = default"}, env, _Sink())
        assert result.ok
        assert env.get_sql_dialect() is SqlDialect.DEFAULT

    def test_reset_all_restores_default_dialect(self, env, router):
        router.execute(None, {"sql": "SET table.sql-dialect = hive; SET table.dml-sync = true"}, env, _Sink())
        result = router.execute(None, {"sql": "RESET ALL"}, env, _Sink())
        assert result.ok
        assert env.get_sql_dialect() is SqlDialect.DEFAULT
        assert len(env.configuration) == 0

    def test_explain(self, env, router):
        env.execute_sql("CREATE TABLE t (a INTEGER)")
        sink = _Sink()
        result = router.execute(None, {"sql": "EXPLAIN SELECT a FROM t"}, env, sink)
        assert result.ok
        assert len(sink.calls) == 1
        assert sink.calls[0]

    def test_backend_error_surfaces_as_backend_failure(self, env, router):
        result = router.execute(None, {"sql": "DROP TABLE missing_table"}, env, _Sink())
        assert isinstance(result.error, BackendFailure)
        assert isinstance(result.error.cause, duckdb.Error)

    def test_describe_missing_table(self, env, router):
        result = router.execute(None, {"sql": "DESC missing_table"}, env, _Sink())
        assert isinstance(result.error, BackendFailure)

    def test_select_unsupported_and_not_executed(self, env, router):
        env.execute_sql("CREATE TABLE t (a INTEGER)")
        result = router.execute(None, {"sql": "SELECT * FROM t"}, env, _Sink())
        assert not result.ok
        assert result.error.kind.value == "UNSUPPORTED"

    def test_quoted_identifiers_reach_duckdb_unquoted(self, env, router):
        env.execute_sql('CREATE SCHEMA "db one"')
        env.execute_sql('CREATE TABLE "db one".orders (id INTEGER)')
        sink = _Sink()
        result = router.execute(None, {"sql": "USE `db one`; DESC `orders`"}, env, sink)
        assert result.ok, result.error
        assert env.get_current_database() == "db one"
        assert sink.calls == ["Column\tType\nid\tINTEGER\n"]

    def test_comment_inside_set_not_stored(self, env, router):
        result = router.execute(None, {"sql": "SET table.local-time-zone =\n-- note\n UTC"}, env, _Sink())
        assert result.ok, result.error
        assert env.configuration.to_dict() == {"table.local-time-zone": "UTC"}
