"""Execution contexts the router dispatches commands to."""

from __future__ import annotations

from router_engine.context.base import ExecutionContext
from router_engine.context.configuration import ConfigurationStore
from router_engine.context.local_environment import LocalTableEnvironment
from router_engine.context.types import SqlDialect, TableResult, TableSchema

__all__ = [
    "ConfigurationStore",
    "ExecutionContext",
    "LocalTableEnvironment",
    "SqlDialect",
    "TableResult",
    "TableSchema",
]
