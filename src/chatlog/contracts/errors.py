"""Failure types for the two pipeline stages.

The stages fail in disjoint ways:

- TransformError: raw data could not be coerced into the declared shape
  (not an object where one is required, unparsable date). Raised by the
  Transformer; validation never runs afterwards.
- ValidationError: the typed graph was built but violates one or more
  constraints. Raised by the Validator carrying EVERY violation found
  across the graph, never just the first.

Both derive from ChatLogError so callers can catch either, or branch on
the concrete class.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

# Separator between property paths in ValidationError messages.
# Paths built from declared wire names never contain it. Unknown keys are
# reported verbatim and may, so read ValidationError.properties for exact paths.
VIOLATION_SEPARATOR = ", "

DEFAULT_VALIDATION_TITLE = "The following field values do not meet constraints"


class ChatLogError(Exception):
    """Base class for all chat log parsing failures."""


class TransformError(ChatLogError):
    """Raised when raw input cannot be coerced into the target type.

    Attributes:
        target: Name of the root type being parsed (e.g. "Session")
        reason: The underlying coercion failure message
        path: Dotted/bracket path of the offending field, if known
    """

    def __init__(self, target: str, reason: str, *, path: str | None = None) -> None:
        self.target = target
        self.reason = reason
        self.path = path
        message = f"Parsing object to {target} failed: {reason}"
        if path:
            message = f"{message} (at {path})"
        super().__init__(message)


@dataclass(frozen=True)
class Violation:
    """A single constraint violation.

    Attributes:
        field: Dotted/bracket property path, using wire names
        message: Human-readable reason
        value: The offending value (for debugging)
    """

    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(ChatLogError):
    """Raised when a typed graph violates constraints.

    Attributes:
        title: Message prefix naming what was validated
        violations: Every violation, in depth-first declaration order
    """

    def __init__(self, title: str, violations: Sequence[Violation]) -> None:
        if not violations:
            raise ValueError("ValidationError requires at least one violation")
        self.title = title
        self.violations = tuple(violations)
        super().__init__(f"{title}: {VIOLATION_SEPARATOR.join(self.properties)}")

    @property
    def properties(self) -> list[str]:
        """Offending property paths, in report order."""
        return [violation.field for violation in self.violations]
