"""Shared fixtures for CLI tests.

``sqlrouter run`` installs its own root log handler bound to the stream the
CliRunner provides.  That stream is closed after each invocation, so the
root logger is restored around every test.
"""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def sql_file(tmp_path):
    """Write a SQL script to a temporary file and return its path."""

    def _write(sql: str, name: str = "script.sql"):
        path = tmp_path / name
        path.write_text(sql, encoding="utf-8")
        return path

    return _write
