"""SQL command routing."""

from __future__ import annotations

from router_engine.router.dispatcher import OutputCallback, SqlRouter
from router_engine.router.result import CommandOutcome, RouterResult, RouterStatus

__all__ = [
    "CommandOutcome",
    "OutputCallback",
    "RouterResult",
    "RouterStatus",
    "SqlRouter",
]
