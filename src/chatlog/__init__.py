"""
chatlog: Typed parsing and validation of recorded agent/candidate chat logs.

Raw JSON-like session trees are transformed into a typed entity graph
(resolving each polymorphic payload from its sibling discriminators) and
then validated as a whole, reporting every constraint violation at once.

Example:
    from chatlog import configure, parse_session

    settings = configure(Path("chatlog.yaml"))   # optional: settings + logging
    session = parse_session(raw, settings)
    session.chat_logs[0].data   # HintPrompt, Prompt, ChoiceGroupPrompt or CandidateAnswer
"""

from chatlog.contracts import ParseResult, Session, TransformError, ValidationError
from chatlog.core import ParserSettings, configure, load_settings
from chatlog.engine import parse_session, parse_session_async, try_parse_session

__version__ = "0.1.0"

__all__ = [
    "ParseResult",
    "ParserSettings",
    "Session",
    "TransformError",
    "ValidationError",
    "__version__",
    "configure",
    "load_settings",
    "parse_session",
    "parse_session_async",
    "try_parse_session",
]
