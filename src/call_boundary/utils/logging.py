"""Logging helpers for call-boundary.

The library itself only ever logs through module loggers at DEBUG and
leaves handler configuration to the application.  :func:`setup_logging`
is an opt-in convenience for applications and tests.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

_CONTEXT_FIELDS: tuple[str, ...] = ("boundary", "event", "phase", "fault_type")


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logs with stable keys."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Optional boundary context
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value

        return json.dumps(data, ensure_ascii=False)


def setup_logging(level: str = "INFO", *, structured: bool = False) -> None:
    """Configure the ``call_boundary`` logger.

    Calling it again updates the level and the formatter of the handler
    installed by the first call instead of adding another one.
    """
    logger = logging.getLogger("call_boundary")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter: logging.Formatter
    if structured:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    # Avoid duplicate handlers if setup is called multiple times
    for existing in logger.handlers:
        if getattr(existing, "_call_boundary_handler", False):
            existing.setFormatter(formatter)
            return
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler._call_boundary_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return module logger."""
    return logging.getLogger(name)
