# src/chatlog/engine/orchestrator.py
"""Session Orchestrator: the public parse entry point.

Runs the two stages in strict sequence over one raw tree:

    raw --Transformer.parse--> Session --Validator.check--> Session

A TransformError aborts before validation runs. A ValidationError carries
every violation in the graph. There is no partial success.

Entry points:
    parse_session(raw)              sync, raises
    await parse_session_async(raw)  suspend-capable form of the same call
    try_parse_session(raw)          returns a ParseResult instead of raising

Every call builds its own Transformer/Validator from immutable settings and
allocates a fresh graph, so calls are independent across threads and tasks.
"""

from typing import Any

from chatlog.contracts.entities import Session
from chatlog.contracts.errors import ChatLogError
from chatlog.contracts.results import ParseResult
from chatlog.core.config import ParserSettings
from chatlog.core.logging import get_logger
from chatlog.engine.transformer import Transformer
from chatlog.engine.validator import Validator

logger = get_logger(__name__)


def parse_session(raw: Any, settings: ParserSettings | None = None) -> Session:
    """Transform then validate a raw session tree.

    Args:
        raw: JSON-compatible tree shaped like a Session
        settings: Pipeline settings (defaults reproduce the standard behaviour)

    Returns:
        The validated Session.

    Raises:
        TransformError: If the raw tree cannot be coerced (validation skipped).
        ValidationError: If the typed session violates constraints.
    """
    settings = settings if settings is not None else ParserSettings()
    session = Transformer(settings.transform).parse(Session, raw)
    Validator(settings.validation).check(session, title=settings.error_title)
    logger.debug("session_parsed", record_count=len(session.chat_logs or []))
    return session


async def parse_session_async(raw: Any, settings: ParserSettings | None = None) -> Session:
    """Async form of parse_session.

    Performs no I/O and never suspends; the coroutine exists so callers in
    an event loop can await the parse like any other task.
    """
    return parse_session(raw, settings)


def try_parse_session(raw: Any, settings: ParserSettings | None = None) -> ParseResult:
    """Parse a raw session tree, returning the outcome instead of raising.

    Returns:
        ParseResult.success(session), or ParseResult.failure(error) whose
        is_transform_error / is_validation_error tells the stages apart.
    """
    try:
        session = parse_session(raw, settings)
    except ChatLogError as e:
        return ParseResult.failure(e)
    return ParseResult.success(session)


def check_session(session: Session, settings: ParserSettings | None = None) -> Session:
    """Validate an already-typed Session with the session error title."""
    settings = settings if settings is not None else ParserSettings()
    return Validator(settings.validation).check(session, title=settings.error_title)
