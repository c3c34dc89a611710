"""Parse outcomes.

ParseResult lets callers branch on the failure kind without catching
exceptions:

    result = try_parse_session(raw)
    if result.is_transform_error:
        ...   # input was structurally malformed
    elif result.is_validation_error:
        ...   # result.error.properties lists every offending path

IMPORTANT: status uses Literal["success", "error"], NOT an enum.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from chatlog.contracts.errors import ChatLogError, TransformError, ValidationError

if TYPE_CHECKING:
    from chatlog.contracts.entities import Session


@dataclass(frozen=True)
class ParseResult:
    """Result of a session parse.

    Use the factory methods to create instances.
    Invariant: exactly one of ``session`` and ``error`` is set.
    """

    status: Literal["success", "error"]
    session: Session | None
    error: ChatLogError | None

    def __post_init__(self) -> None:
        if self.status == "success" and (self.session is None or self.error is not None):
            raise ValueError("ParseResult with status='success' MUST carry a session and no error")
        if self.status == "error" and (self.error is None or self.session is not None):
            raise ValueError("ParseResult with status='error' MUST carry an error and no session")

    @classmethod
    def success(cls, session: Session) -> ParseResult:
        return cls(status="success", session=session, error=None)

    @classmethod
    def failure(cls, error: ChatLogError) -> ParseResult:
        return cls(status="error", session=None, error=error)

    @property
    def is_transform_error(self) -> bool:
        return isinstance(self.error, TransformError)

    @property
    def is_validation_error(self) -> bool:
        return isinstance(self.error, ValidationError)

    def unwrap(self) -> Session:
        """Return the session, re-raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        assert self.session is not None  # guaranteed by __post_init__
        return self.session
