"""Typed outcome of one :meth:`SqlRouter.execute` call."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from router_engine.classifier import CommandKind
from router_engine.errors import RouterError


class RouterStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"


class CommandOutcome(BaseModel):
    """Record of a single command that ran to completion."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(description="Zero-based position of the command in the script.")
    kind: CommandKind
    statement: str = Field(default="", description="Statement text as classified.")
    output: str | None = Field(
        default=None,
        description="Text delivered to the callback, if the command produced any.",
    )


class RouterResult(BaseModel):
    """Success or failure of a whole script.

    A failure on command *k* leaves commands ``0..k-1`` in ``completed``
    (their effects are not rolled back) and never runs ``k+1..n``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: RouterStatus
    commands_total: int = 0
    completed: list[CommandOutcome] = Field(default_factory=list)
    error: RouterError | None = None
    failed_index: int | None = Field(
        default=None,
        description="Index of the command that failed; None if the script never reached dispatch.",
    )

    @property
    def ok(self) -> bool:
        return self.status == RouterStatus.SUCCESS

    @property
    def outputs(self) -> list[str]:
        """Callback payloads of the completed commands, in order."""
        return [c.output for c in self.completed if c.output is not None]

    def raise_for_error(self) -> None:
        """Re-raise the captured error, if any."""
        if self.error is not None:
            raise self.error

    @classmethod
    def failure(
        cls,
        error: RouterError,
        *,
        commands_total: int = 0,
        completed: list[CommandOutcome] | None = None,
        failed_index: int | None = None,
    ) -> RouterResult:
        return cls(
            status=RouterStatus.FAIL,
            commands_total=commands_total,
            completed=completed or [],
            error=error,
            failed_index=failed_index,
        )
