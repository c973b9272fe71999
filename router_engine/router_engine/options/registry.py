"""Registry of every configuration key the router accepts in ``SET``.

The registry is the union of several independently maintained option
catalogs.  Each catalog is a plain accessor returning its options, and the
registry is a left-to-right fold over those accessors: a key declared by a
later catalog replaces the same key from an earlier one.

A catalog that raises, or that yields something other than a
:class:`ConfigOption`, is logged and skipped; the rest of the build carries
on.  The process-wide registry is built lazily on first use and never torn
down.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from types import MappingProxyType

from . import execution, optimizer, table
from ._types import ConfigOption

logger = logging.getLogger(__name__)

OptionCatalog = Callable[[], Iterable[ConfigOption]]

DEFAULT_CATALOGS: tuple[OptionCatalog, ...] = (
    execution.options,
    optimizer.options,
    table.options,
)


class OptionRegistry:
    """Read-only mapping of configuration key to :class:`ConfigOption`."""

    def __init__(self, options: dict[str, ConfigOption]) -> None:
        self._options = MappingProxyType(dict(options))

    @classmethod
    def build(cls, catalogs: Sequence[OptionCatalog]) -> OptionRegistry:
        """Fold *catalogs* into a registry (last writer wins on key collision)."""
        merged: dict[str, ConfigOption] = {}
        for catalog in catalogs:
            name = getattr(catalog, "__module__", None) or repr(catalog)
            try:
                entries = list(catalog())
            except Exception:
                logger.error("Failed to read config options from %s", name, exc_info=True)
                continue

            for entry in entries:
                if not isinstance(entry, ConfigOption):
                    logger.error(
                        "Skipping non-option entry %r from %s",
                        entry,
                        name,
                    )
                    continue
                if entry.key in merged:
                    logger.debug("Config option %s from %s replaces an earlier entry", entry.key, name)
                merged[entry.key] = entry

        logger.debug("Built option registry with %d keys", len(merged))
        return cls(merged)

    def lookup(self, key: str) -> ConfigOption | None:
        """Return the option registered under *key*, or ``None``."""
        return self._options.get(key)

    def contains_key(self, key: str) -> bool:
        return key in self._options

    def keys(self) -> list[str]:
        """Return all registered keys, sorted."""
        return sorted(self._options)

    def options(self) -> list[ConfigOption]:
        """Return all registered options, sorted by key."""
        return [self._options[k] for k in self.keys()]

    def __len__(self) -> int:
        return len(self._options)

    def __contains__(self, key: object) -> bool:
        return key in self._options

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())


_lock = threading.Lock()
_instance: OptionRegistry | None = None


def get_option_registry() -> OptionRegistry:
    """Return the process-wide registry built from :data:`DEFAULT_CATALOGS`.

    Thread-safe.  Built on first call.
    """
    global _instance
    if _instance is not None:
        return _instance

    with _lock:
        if _instance is None:
            _instance = OptionRegistry.build(DEFAULT_CATALOGS)
        return _instance


def reset_option_registry() -> None:
    """Drop the cached registry.  **For testing only.**"""
    global _instance
    with _lock:
        _instance = None
