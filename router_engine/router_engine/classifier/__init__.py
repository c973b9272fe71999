"""SQL command classifier -- SQL text in, typed commands out.

Usage::

    from router_engine.classifier import get_classifier, CommandKind
    from router_engine.config import load_settings

    commands = get_classifier(load_settings()).classify("USE db1; SHOW TABLES")
    assert commands[0].kind is CommandKind.USE

The built-in ``sqlglot`` implementation splits statements with the SQLGlot
tokenizer for ``Settings.classifier_dialect``.  Other backends are added with
``register_implementation(name, factory)`` and selected through
``Settings.classifier_implementation`` without touching the dispatcher.
"""

from ._factory import DEFAULT_IMPLEMENTATION, get_classifier, register_implementation, reset_classifier
from ._protocols import SqlClassifier
from ._types import ClassifierError, Command, CommandCategory, CommandKind

__all__ = [
    # Factory
    "DEFAULT_IMPLEMENTATION",
    "get_classifier",
    "register_implementation",
    "reset_classifier",
    # Protocols
    "SqlClassifier",
    # Types
    "Command",
    "CommandCategory",
    "CommandKind",
    # Exceptions
    "ClassifierError",
]
