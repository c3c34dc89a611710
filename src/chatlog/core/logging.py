# src/chatlog/core/logging.py
"""Structured logging for the chat log parser.

structlog renders every event. Records emitted through plain
``logging.getLogger`` (by libraries or by callers) pass through the same
processors via ProcessorFormatter, so one stream carries one format.

Pipeline events:
    transform_failed   target, path, reason
    validation_failed  target, violation_count, properties
    session_parsed     record_count  (debug)

Call configure_from_settings() (or chatlog.core.configure() with a
settings file) once at startup. Until then structlog's defaults apply.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

if TYPE_CHECKING:
    from chatlog.core.config import ParserSettings

# Added by ProcessorFormatter to every event dict
_FORMATTER_KEYS = ("_record", "_from_structlog")


def _strip_formatter_keys(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # A missing key means the ProcessorFormatter wiring is broken, so let it raise
    for key in _FORMATTER_KEYS:
        del event_dict[key]
    return event_dict


def _pre_chain() -> list[Any]:
    """Processors shared by structlog events and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(json_output: bool) -> list[Any]:
    if json_output:
        return [_strip_formatter_keys, structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [_strip_formatter_keys, structlog.dev.ConsoleRenderer(colors=False)]


def _resolve_level(level: str) -> int:
    levels = logging.getLevelNamesMapping()
    name = level.upper()
    if name not in levels:
        raise ValueError(f"Unknown log level: {level!r}")
    return levels[name]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging to one handler.

    Replaces any handlers on the root logger, so calling it again
    reconfigures cleanly.

    Args:
        json_output: Emit JSON lines instead of console text
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        stream: Destination (defaults to the current sys.stdout)

    Raises:
        ValueError: If ``level`` is not a known level name.
    """
    root_level = _resolve_level(level)
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(ProcessorFormatter(processors=_render_chain(json_output), foreign_pre_chain=pre_chain))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(root_level)


def configure_from_settings(settings: "ParserSettings") -> None:
    """Apply ``log_level`` and ``json_logs`` from parser settings."""
    configure_logging(json_output=settings.json_logs, level=settings.log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
