"""Log handler setup for the router and its command line.

When ``ROUTER_STRUCTURED_LOGGING=true`` every record is emitted as a single
JSON line so log aggregators can index it without regex parsing::

    {
        "timestamp": "2025-05-15T12:34:56.789012+00:00",
        "level": "INFO",
        "logger": "router_engine.router.dispatcher",
        "message": "USE: db1",
        "command": "USE",            // present when emitted by the dispatcher
        "exc_info": "Traceback ..."  // present only on exceptions
    }

Otherwise a plain text handler is installed.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from typing import Any

from router_engine.config import Settings

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Extra attributes the dispatcher attaches via ``extra=``.
_EXTRA_FIELDS = ("command", "statement_index")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Render *record* as a single JSON line."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in _EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(settings: Settings) -> logging.Handler:
    """Replace the root logger's handlers according to *settings*.

    Log output goes to stderr so that callback output on stdout stays clean.
    Returns the installed handler.
    """
    handler = logging.StreamHandler(sys.stderr)
    if settings.structured_logging:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if settings.debug else settings.log_level)
    return handler
