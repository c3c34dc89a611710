"""Core infrastructure: Configuration, Logging."""

from chatlog.core.config import (
    ParserSettings,
    TransformOptions,
    ValidatorOptions,
    configure,
    load_settings,
)
from chatlog.core.logging import configure_from_settings, configure_logging, get_logger

__all__ = [
    "ParserSettings",
    "TransformOptions",
    "ValidatorOptions",
    "configure",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "load_settings",
]
