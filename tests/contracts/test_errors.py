# tests/contracts/test_errors.py
"""Tests for TransformError, Violation and ValidationError."""

import pytest

from chatlog.contracts import (
    VIOLATION_SEPARATOR,
    ChatLogError,
    TransformError,
    ValidationError,
    Violation,
)


class TestTransformError:
    def test_message_names_target(self) -> None:
        error = TransformError("Session", "expected an object for Session, got str")
        assert str(error) == "Parsing object to Session failed: expected an object for Session, got str"
        assert error.path is None

    def test_message_includes_path(self) -> None:
        error = TransformError("Session", "bad date", path="chatLogs[0].time")
        assert str(error).endswith("(at chatLogs[0].time)")
        assert error.target == "Session"
        assert error.reason == "bad date"

    def test_is_chatlog_error(self) -> None:
        assert isinstance(TransformError("Session", "x"), ChatLogError)


class TestViolation:
    def test_str(self) -> None:
        assert str(Violation("chatLogs[0].sender", "Input should be 'AGENT' or 'CANDIDATE'")) == (
            "chatLogs[0].sender: Input should be 'AGENT' or 'CANDIDATE'"
        )

    def test_frozen(self) -> None:
        violation = Violation("a", "b")
        with pytest.raises(AttributeError):
            violation.field = "c"  # type: ignore[misc]


class TestValidationError:
    def test_message_joins_every_path(self) -> None:
        error = ValidationError(
            "Title",
            [Violation("chatLogs[0].sender", "bad"), Violation("chatLogs[1].data.text", "short")],
        )
        assert str(error) == "Title: chatLogs[0].sender, chatLogs[1].data.text"

    def test_properties_in_report_order(self) -> None:
        error = ValidationError("T", [Violation("b", "x"), Violation("a", "y")])
        assert error.properties == ["b", "a"]

    def test_violations_stored_as_tuple(self) -> None:
        violations = [Violation("a", "x")]
        error = ValidationError("T", violations)
        violations.append(Violation("b", "y"))
        assert len(error.violations) == 1

    def test_message_can_be_split_back_into_paths(self) -> None:
        paths = ["chatLogs[0].data.types[1]", "chatLogs[2].data.options[0].text"]
        error = ValidationError("T", [Violation(path, "m") for path in paths])
        assert str(error).split(": ", 1)[1].split(VIOLATION_SEPARATOR) == paths

    def test_requires_a_violation(self) -> None:
        with pytest.raises(ValueError, match="at least one violation"):
            ValidationError("T", [])

    def test_distinct_from_transform_error(self) -> None:
        error = ValidationError("T", [Violation("a", "x")])
        assert isinstance(error, ChatLogError)
        assert not isinstance(error, TransformError)
