"""Error taxonomy for the SQL router.

Every failure the router can report is a :class:`RouterError`.  The three
concrete kinds map to who is at fault: the caller (:class:`ValidationFailure`),
the router's supported surface (:class:`UnsupportedOperation`), or the
execution backend (:class:`BackendFailure`).
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    """Category of a router failure."""

    VALIDATION = "VALIDATION"
    UNSUPPORTED = "UNSUPPORTED"
    BACKEND = "BACKEND"


class RouterError(Exception):
    """Base class for all router failures."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, statement: str | None = None) -> None:
        self.message = message
        self.statement = statement
        super().__init__(message)

    def to_dict(self) -> dict[str, str | None]:
        """Return a JSON-friendly representation of the error."""
        return {
            "type": type(self).__name__,
            "kind": self.kind.value,
            "message": self.message,
            "statement": self.statement,
        }


class ValidationFailure(RouterError):
    """The input to the router is missing, blank, or malformed."""

    kind = ErrorKind.VALIDATION


class InvalidConfigKeyError(ValidationFailure, ValueError):
    """``SET`` named a key that is not in the option registry."""

    def __init__(self, key: str, *, statement: str | None = None) -> None:
        self.key = key
        super().__init__(
            f"{key} is not a valid table/sql config option; "
            "run `sqlrouter options` to list the supported keys",
            statement=statement,
        )


class UnsupportedOperation(RouterError):
    """The statement was classified but the router does not handle it."""

    kind = ErrorKind.UNSUPPORTED


class BackendFailure(RouterError):
    """The execution backend raised while running a command."""

    kind = ErrorKind.BACKEND

    def __init__(
        self,
        message: str,
        *,
        statement: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.cause = cause
        super().__init__(message, statement=statement)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by {type(self.cause).__name__}: {self.cause})"
        return self.message
