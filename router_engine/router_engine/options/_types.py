"""Configuration option metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ConfigOption:
    """A single table/SQL configuration option.

    Immutable.  ``data_type`` is the Python type of the value the option
    expects; values arriving through ``SET`` are always stored as strings.
    """

    key: str
    default_value: Any = None
    description: str = ""
    data_type: type = str

    @property
    def type_name(self) -> str:
        return self.data_type.__name__

    def __str__(self) -> str:
        return f"{self.key} ({self.type_name}, default={self.default_value!r})"
