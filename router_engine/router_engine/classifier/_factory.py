"""Classifier selection.

A classifier is chosen by two settings: ``classifier_implementation`` names
the backend (``"sqlglot"`` is built in) and ``classifier_dialect`` names the
tokenizer dialect the backend is built for.  Classifiers hold no per-call
state, so one instance per (implementation, dialect) pair is cached and
shared by every router that asks for it.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from router_engine.config import Settings, load_settings

from ._protocols import SqlClassifier
from ._types import ClassifierError

logger = logging.getLogger(__name__)

ClassifierFactory = Callable[[str], SqlClassifier]

DEFAULT_IMPLEMENTATION = "sqlglot"

_lock = threading.Lock()
_implementations: dict[str, ClassifierFactory] = {}
_cache: dict[tuple[str, str], SqlClassifier] = {}


def _sqlglot_factory(dialect: str) -> SqlClassifier:
    from .impl.sqlglot_impl import SqlGlotClassifier

    return SqlGlotClassifier(tokenizer_dialect=dialect)


def register_implementation(name: str, factory_fn: ClassifierFactory) -> None:
    """Register *factory_fn* under *name*.

    The factory receives the tokenizer dialect and returns a classifier for
    it.  Registering an existing name replaces it and drops any classifiers
    already built from the old factory.
    """
    key = name.strip().lower()
    with _lock:
        _implementations[key] = factory_fn
        for cached in [k for k in _cache if k[0] == key]:
            del _cache[cached]
    logger.debug("Registered classifier implementation '%s'", key)


def get_classifier(settings: Settings | None = None) -> SqlClassifier:
    """Return the shared classifier selected by *settings*.

    Raises:
        ClassifierError: If the implementation is not registered or rejects
            the dialect.
    """
    settings = settings or load_settings()
    key = (settings.classifier_implementation, settings.classifier_dialect)

    cached = _cache.get(key)
    if cached is not None:
        return cached

    with _lock:
        cached = _cache.get(key)
        if cached is not None:
            return cached

        name, dialect = key
        if name == DEFAULT_IMPLEMENTATION and name not in _implementations:
            factory_fn: ClassifierFactory | None = _sqlglot_factory
        else:
            factory_fn = _implementations.get(name)
        if factory_fn is None:
            known = sorted({DEFAULT_IMPLEMENTATION, *_implementations})
            raise ClassifierError("", f"unknown classifier implementation '{name}' (known: {', '.join(known)})")

        try:
            classifier = factory_fn(dialect)
        except ValueError as exc:
            raise ClassifierError("", f"classifier '{name}' rejected dialect '{dialect}': {exc}") from exc

        _cache[key] = classifier
        logger.debug("Built %s classifier for dialect '%s'", name, dialect)
        return classifier


def reset_classifier() -> None:
    """Drop cached classifiers and custom registrations.  **For testing only.**"""
    with _lock:
        _implementations.clear()
        _cache.clear()
