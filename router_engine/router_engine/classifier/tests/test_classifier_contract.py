"""Behavioural tests for the SQLGlot-backed classifier."""

from __future__ import annotations

import pytest

from router_engine.classifier import ClassifierError, CommandCategory, CommandKind
from router_engine.classifier.impl.sqlglot_impl import SqlGlotClassifier


@pytest.fixture()
def classifier() -> SqlGlotClassifier:
    return SqlGlotClassifier()


# ---------------------------------------------------------------------------
# Statement splitting
# ---------------------------------------------------------------------------


class TestSplitStatements:
    def test_splits_on_semicolons(self, classifier):
        assert classifier.split_statements("USE db1; SHOW TABLES;") == ["USE db1", "SHOW TABLES"]

    def test_trailing_statement_without_semicolon(self, classifier):
        assert classifier.split_statements("USE db1;\nSHOW TABLES") == ["USE db1", "SHOW TABLES"]

    def test_semicolon_inside_string_does_not_split(self, classifier):
        stmts = classifier.split_statements("INSERT INTO t VALUES ('a;b'); USE db1")
        assert stmts == ["INSERT INTO t VALUES ('a;b')", "USE db1"]

    def test_empty_statements_dropped(self, classifier):
        assert classifier.split_statements(";;USE db1;;") == ["USE db1"]

    def test_leading_comment_not_part_of_statement(self, classifier):
        assert classifier.split_statements("-- switch\nUSE db1") == ["USE db1"]

    def test_comment_only_script_is_empty(self, classifier):
        assert classifier.split_statements("-- nothing here\n") == []

    def test_unterminated_string_raises(self, classifier):
        with pytest.raises(ClassifierError):
            classifier.split_statements("SELECT 'abc")


# ---------------------------------------------------------------------------
# Single-statement classification
# ---------------------------------------------------------------------------


class TestClassifyStatement:
    @pytest.mark.parametrize(
        ("sql", "kind", "operands"),
        [
            ("USE db1", CommandKind.USE, ("db1",)),
            ("use catalog cat1", CommandKind.USE_CATALOG, ("cat1",)),
            ("SHOW CATALOGS", CommandKind.SHOW_CATALOGS, ()),
            ("show current catalog", CommandKind.SHOW_CURRENT_CATALOG, ()),
            ("SHOW DATABASES", CommandKind.SHOW_DATABASES, ()),
            ("SHOW SCHEMAS", CommandKind.SHOW_DATABASES, ()),
            ("SHOW CURRENT DATABASE", CommandKind.SHOW_CURRENT_DATABASE, ()),
            ("SHOW TABLES", CommandKind.SHOW_TABLES, ()),
            ("SHOW USER FUNCTIONS", CommandKind.SHOW_FUNCTIONS, ()),
            ("SHOW FUNCTIONS", CommandKind.SHOW_FUNCTIONS, ()),
            ("SHOW MODULES", CommandKind.SHOW_MODULES, ()),
            ("DESC orders", CommandKind.DESC, ("orders",)),
            ("DESCRIBE orders", CommandKind.DESCRIBE, ("orders",)),
            ("RESET ALL", CommandKind.RESET, ("ALL",)),
            ("RESET table.dml-sync", CommandKind.RESET, ("table.dml-sync",)),
            ("USE `db one`", CommandKind.USE, ("db one",)),
            ("USE \"db one\"", CommandKind.USE, ("db one",)),
            ("USE `odd``name`", CommandKind.USE, ("odd`name",)),
            ("USE catalog", CommandKind.USE, ("catalog",)),
            ("USE CATALOG", CommandKind.USE, ("CATALOG",)),
            ("USE CATALOG `my cat`", CommandKind.USE_CATALOG, ("my cat",)),
            ("USE CATALOG catalog", CommandKind.USE_CATALOG, ("catalog",)),
            ("DESC `t`", CommandKind.DESC, ("t",)),
            ("DESCRIBE \"order items\"", CommandKind.DESCRIBE, ("order items",)),
        ],
    )
    def test_operand_extraction(self, sql, kind, operands):
        cmd = SqlGlotClassifier.classify_statement(sql)
        assert cmd.kind is kind
        assert cmd.operands == operands
        assert cmd.statement == sql

    @pytest.mark.parametrize(
        ("sql", "operands"),
        [
            ("SET table.sql-dialect = hive", ("table.sql-dialect", "hive")),
            ("SET table.sql-dialect=hive", ("table.sql-dialect", "hive")),
            ("SET table.dml-sync true", ("table.dml-sync", "true")),
            ("SET 'table.local-time-zone' = 'UTC'", ("table.local-time-zone", "UTC")),
            ("SET table.dml-sync", ("table.dml-sync",)),
            ("SET", ()),
        ],
    )
    def test_set_forms(self, sql, operands):
        cmd = SqlGlotClassifier.classify_statement(sql)
        assert cmd.kind is CommandKind.SET
        assert cmd.operands == operands

    @pytest.mark.parametrize(
        ("sql", "kind"),
        [
            ("INSERT INTO t VALUES (1)", CommandKind.INSERT_INTO),
            ("INSERT OVERWRITE t SELECT * FROM s", CommandKind.INSERT_OVERWRITE),
            ("WITH s AS (SELECT 1 AS a) INSERT INTO t SELECT a FROM s", CommandKind.INSERT_INTO),
            ("with s as (select 1) insert overwrite t select * from s", CommandKind.INSERT_OVERWRITE),
            ("CREATE FUNCTION f AS 'com.example.F'", CommandKind.CREATE_FUNCTION),
            ("CREATE TEMPORARY SYSTEM FUNCTION f AS 'com.example.F'", CommandKind.CREATE_FUNCTION),
            ("CREATE MACRO add_one(x) AS x + 1", CommandKind.CREATE_FUNCTION),
            ("DROP FUNCTION f", CommandKind.DROP_FUNCTION),
            ("ALTER FUNCTION f AS 'com.example.G'", CommandKind.ALTER_FUNCTION),
            ("CREATE CATALOG c WITH ('type'='hive')", CommandKind.CREATE_CATALOG),
            ("DROP CATALOG c", CommandKind.DROP_CATALOG),
            ("CREATE TABLE t (a INT)", CommandKind.CREATE_TABLE),
            ("create or replace table t (a int)", CommandKind.CREATE_TABLE),
            ("DROP TABLE t", CommandKind.DROP_TABLE),
            ("ALTER TABLE t RENAME TO u", CommandKind.ALTER_TABLE),
            ("CREATE OR REPLACE TEMP VIEW v AS SELECT 1", CommandKind.CREATE_VIEW),
            ("DROP VIEW v", CommandKind.DROP_VIEW),
            ("CREATE DATABASE db1", CommandKind.CREATE_DATABASE),
            ("DROP DATABASE db1", CommandKind.DROP_DATABASE),
            ("ALTER DATABASE db1 SET DBPROPERTIES ('k'='v')", CommandKind.ALTER_DATABASE),
        ],
    )
    def test_mutating_statements_carry_whole_text(self, sql, kind):
        cmd = SqlGlotClassifier.classify_statement(sql)
        assert cmd.kind is kind
        assert cmd.kind.category is CommandCategory.MUTATING
        assert cmd.operands == (sql,)

    def test_explain_keeps_statement(self):
        cmd = SqlGlotClassifier.classify_statement("EXPLAIN SELECT 1")
        assert cmd.kind is CommandKind.EXPLAIN
        assert cmd.statement == "EXPLAIN SELECT 1"

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM t",
            "select 1",
            "WITH x AS (SELECT 1) SELECT * FROM x",
            "WITH x AS (SELECT 'insert into t' AS s) SELECT * FROM x",
            "VALUES (1), (2)",
        ],
    )
    def test_selects(self, sql):
        assert SqlGlotClassifier.classify_statement(sql).kind is CommandKind.SELECT

    @pytest.mark.parametrize("sql", ["MERGE INTO t USING s ON t.id = s.id", "USE db1 extra", "USE `db one` extra", "GRANT ALL ON t"])
    def test_unknown(self, sql):
        cmd = SqlGlotClassifier.classify_statement(sql)
        assert cmd.kind is CommandKind.UNKNOWN
        assert cmd.kind.category is CommandCategory.UNSUPPORTED

    @pytest.mark.parametrize(
        ("sql", "kind"),
        [("USE", CommandKind.USE), ("DESC", CommandKind.DESC), ("DESCRIBE", CommandKind.DESCRIBE)],
    )
    def test_missing_operand_yields_empty_operands(self, sql, kind):
        cmd = SqlGlotClassifier.classify_statement(sql)
        assert cmd.kind is kind
        assert cmd.operands == ()


# ---------------------------------------------------------------------------
# Whole scripts
# ---------------------------------------------------------------------------


class TestClassify:
    def test_script_order_preserved(self, classifier):
        cmds = classifier.classify("USE db1; SHOW TABLES; SET table.dml-sync = true")
        assert [c.kind for c in cmds] == [CommandKind.USE, CommandKind.SHOW_TABLES, CommandKind.SET]

    def test_multiline_statement(self, classifier):
        cmds = classifier.classify("CREATE TABLE t (\n  a INT,\n  b VARCHAR\n);")
        assert len(cmds) == 1
        assert cmds[0].kind is CommandKind.CREATE_TABLE
        assert cmds[0].statement.endswith(")")

    def test_operand_accessor(self, classifier):
        cmd = classifier.classify("SET table.dml-sync = true")[0]
        assert cmd.operand(0) == "table.dml-sync"
        assert cmd.operand(1) == "true"
        assert cmd.operand(2) is None
        assert cmd.operand(-1) is None


class TestCommentsInsideStatements:
    def test_comment_between_key_and_value_ignored(self, classifier):
        cmd = classifier.classify("SET table.local-time-zone =\n-- note\n UTC")[0]
        assert cmd.kind is CommandKind.SET
        assert cmd.operands == ("table.local-time-zone", "UTC")

    def test_block_comment_between_key_and_value_ignored(self, classifier):
        cmd = classifier.classify("SET table.dml-sync /* flip */ = true")[0]
        assert cmd.operands == ("table.dml-sync", "true")

    def test_comment_before_identifier_ignored(self, classifier):
        cmds = classifier.classify("USE -- target\n`db one`; DESC /* which */ orders")
        assert [(c.kind, c.operands) for c in cmds] == [
            (CommandKind.USE, ("db one",)),
            (CommandKind.DESC, ("orders",)),
        ]

    def test_comment_between_keywords_still_classifies(self, classifier):
        cmd = classifier.classify("SHOW /* all */ TABLES")[0]
        assert cmd.kind is CommandKind.SHOW_TABLES

    def test_comment_marker_inside_string_value_kept(self, classifier):
        cmd = classifier.classify("SET 'pipeline.name' = 'a -- b'")[0]
        assert cmd.operands == ("pipeline.name", "a -- b")

    def test_statement_text_keeps_comments(self, classifier):
        cmd = classifier.classify("CREATE TABLE t (\n  a INT -- key\n)")[0]
        assert cmd.kind is CommandKind.CREATE_TABLE
        assert cmd.statement == "CREATE TABLE t (\n  a INT -- key\n)"
        assert cmd.operands == (cmd.statement,)
