"""Value types exchanged between the router and an execution context."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


class SqlDialect(str, enum.Enum):
    """SQL dialect an execution context parses statements with."""

    DEFAULT = "default"
    HIVE = "hive"

    @classmethod
    def from_name(cls, name: str) -> SqlDialect | None:
        """Case-insensitive lookup by member name or value; ``None`` if unknown."""
        wanted = name.strip().lower()
        for member in cls:
            if member.value == wanted:
                return member
        return None


@dataclass(frozen=True, slots=True)
class TableSchema:
    """Column names and their data types, in column order."""

    field_names: tuple[str, ...] = ()
    field_types: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.field_names) != len(self.field_types):
            raise ValueError(
                f"Schema has {len(self.field_names)} names but {len(self.field_types)} types"
            )

    @property
    def field_count(self) -> int:
        return len(self.field_names)

    def field_name(self, index: int) -> str:
        """Return the name of field *index* (0-based).  Raises ``IndexError``."""
        return self.field_names[index]

    def field_data_type(self, index: int) -> str:
        """Return the data type of field *index* (0-based).  Raises ``IndexError``."""
        return self.field_types[index]


@dataclass(frozen=True, slots=True)
class TableResult:
    """Rows returned by a statement, fully materialised."""

    columns: tuple[str, ...] = ()
    rows: tuple[tuple[Any, ...], ...] = field(default=())

    def collect(self) -> Iterator[tuple[Any, ...]]:
        return iter(self.rows)

    @property
    def row_count(self) -> int:
        return len(self.rows)
