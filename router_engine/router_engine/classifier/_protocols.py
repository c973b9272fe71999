"""Classifier protocol definition.

Consumer code depends on this protocol, never on a concrete implementation.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ._types import Command


@runtime_checkable
class SqlClassifier(Protocol):
    """Turn SQL text into an ordered sequence of typed commands."""

    def classify(self, sql: str) -> list[Command]:
        """Split *sql* into statements and classify each one.

        Args:
            sql: One or more statements separated by ``;``.

        Returns:
            Commands in source order.  Statements that match no known kind
            are returned as ``CommandKind.UNKNOWN`` rather than dropped.

        Raises:
            ClassifierError: If the text cannot be tokenized.
        """
        ...
