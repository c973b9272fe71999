"""Job parameters: the key/value set the router resolves SQL text from.

Parameters usually arrive as command-line style arguments
(``--sql "USE db1" --parallelism 4``) and are read back as strings, with a
few typed accessors for flags and numbers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence

from router_engine.errors import ValidationFailure

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"true", "yes", "1"})
_FALSE_VALUES = frozenset({"false", "no", "0"})

# Value recorded for a ``--flag`` that is not followed by a value.
_NO_VALUE = "__NO_VALUE_KEY"


class ParameterSet(Mapping[str, str]):
    """Immutable string-to-string parameter mapping.

    Membership is the plain ``key in params`` test.  Being immutable, the set
    never fills in missing keys on read: use ``params.get(key, default)`` to
    read with a fallback and :meth:`with_overrides` to derive a set that
    holds the value.
    """

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data or {})

    # -- construction ---------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> ParameterSet:
        """Build a parameter set, converting every value to ``str``."""
        return cls({str(k): str(v) for k, v in data.items()})

    @classmethod
    def from_args(cls, argv: Sequence[str]) -> ParameterSet:
        """Parse ``--key value`` / ``-key value`` pairs.

        A key followed directly by another key (or by nothing) is recorded
        as a flag with no value.

        Raises
        ------
        ValidationFailure
            If an argument appears where a key is expected.
        """
        data: dict[str, str] = {}
        i = 0
        while i < len(argv):
            token = argv[i]
            if token.startswith("--"):
                key = token[2:]
            elif token.startswith("-") and not _is_number(token):
                key = token[1:]
            else:
                raise ValidationFailure(f"Expected a parameter key at position {i}, got '{token}'")
            if not key:
                raise ValidationFailure(f"Empty parameter key at position {i}")

            i += 1
            if i >= len(argv) or (argv[i].startswith("-") and not _is_number(argv[i])):
                data[key] = _NO_VALUE
            else:
                data[key] = argv[i]
                i += 1
        return cls(data)

    def with_overrides(self, overrides: Mapping[str, str]) -> ParameterSet:
        """Return a new set where *overrides* replace existing keys."""
        merged = dict(self._data)
        merged.update(overrides)
        return ParameterSet(merged)

    # -- Mapping protocol -----------------------------------------------------

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ParameterSet({sorted(self._data)})"

    # -- typed accessors ------------------------------------------------------

    def has_flag(self, key: str) -> bool:
        """True if *key* was given as a bare ``--flag``."""
        return self._data.get(key) == _NO_VALUE

    def require(self, key: str) -> str:
        """Return the value of *key*, failing if it is absent or blank."""
        value = self._data.get(key)
        if value is None or value == _NO_VALUE or not value.strip():
            raise ValidationFailure(f"No value for required parameter '{key}'")
        return value

    def get_boolean(self, key: str, default: bool) -> bool:
        value = self._data.get(key)
        if value is None:
            return default
        if value == _NO_VALUE:
            return True
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES or not lowered:
            return False
        logger.warning(
            "Unable to parse the boolean parameter '%s': %s - using the default value: %s",
            key,
            value,
            default,
        )
        return default

    def get_int(self, key: str, default: int) -> int:
        """Parse *key* as an integer, falling back to *default*.

        Python integers are unbounded, so this also serves values beyond the
        64-bit range; there is no separate ``get_long``.
        """
        value = self._data.get(key)
        if value is None:
            return default
        try:
            return int(value.strip())
        except ValueError:
            return default


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True
