"""Process-level settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from call_boundary.utils.logging import setup_logging

_LOG_FORMATS: frozenset[str] = frozenset({"plain", "json"})


@dataclass(frozen=True)
class Settings:
    """Logging settings loaded from environment in a type-safe, framework-free way."""

    log_level: str
    log_format: str

    @staticmethod
    def from_env() -> Settings:
        prefix = "CALL_BOUNDARY_"
        log_level = os.getenv(f"{prefix}LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
        log_format = os.getenv(f"{prefix}LOG_FORMAT", "plain").strip().lower() or "plain"
        if log_format not in _LOG_FORMATS:
            log_format = "plain"
        return Settings(log_level=log_level, log_format=log_format)


def configure_logging(settings: Settings | None = None) -> Settings:
    """Apply *settings* (or the environment's) to the package logger."""
    resolved = settings if settings is not None else Settings.from_env()
    setup_logging(resolved.log_level, structured=resolved.log_format == "json")
    return resolved
