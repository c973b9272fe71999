"""Configuration option catalogs and the registry built from them."""

from router_engine.options._types import ConfigOption
from router_engine.options.registry import (
    DEFAULT_CATALOGS,
    OptionCatalog,
    OptionRegistry,
    get_option_registry,
    reset_option_registry,
)
from router_engine.options.table import SQL_DIALECT

__all__ = [
    "DEFAULT_CATALOGS",
    "SQL_DIALECT",
    "ConfigOption",
    "OptionCatalog",
    "OptionRegistry",
    "get_option_registry",
    "reset_option_registry",
]
