"""SQL statement router for table environments."""

from router_engine.errors import (
    BackendFailure,
    InvalidConfigKeyError,
    RouterError,
    UnsupportedOperation,
    ValidationFailure,
)
from router_engine.params import ParameterSet
from router_engine.router import RouterResult, RouterStatus, SqlRouter

__all__ = [
    "BackendFailure",
    "InvalidConfigKeyError",
    "ParameterSet",
    "RouterError",
    "RouterResult",
    "RouterStatus",
    "SqlRouter",
    "UnsupportedOperation",
    "ValidationFailure",
]
