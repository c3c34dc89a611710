# src/chatlog/engine/__init__.py
"""Parse engine: Transformer, Validator and the Session Orchestrator.

Example:
    from chatlog.engine import Transformer, Validator, parse_session

    session = parse_session(raw)                       # both stages

    draft = Transformer().parse(Session, raw)          # transform only
    Validator().check(draft)                           # validate only
"""

from chatlog.engine.orchestrator import (
    check_session,
    parse_session,
    parse_session_async,
    try_parse_session,
)
from chatlog.engine.transformer import Transformer, to_plain, transform
from chatlog.engine.validator import Validator, validate

__all__ = [
    "Transformer",
    "Validator",
    "check_session",
    "parse_session",
    "parse_session_async",
    "to_plain",
    "transform",
    "try_parse_session",
    "validate",
]
