# tests/engine/test_orchestrator.py
"""Tests for the session parse entry points."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any
from unittest.mock import patch

import pytest

from chatlog import ParseResult, Session, TransformError, ValidationError, parse_session, parse_session_async, try_parse_session
from chatlog.contracts import CandidateAnswer, ChoiceGroupPrompt, HintPrompt, Option, Prompt
from chatlog.core.config import ParserSettings, TransformOptions, ValidatorOptions
from chatlog.engine import check_session, to_plain, transform
from chatlog.engine.validator import Validator
from tests.fixtures.chat_logs import ANSWER_TEXT, agent_record, prompt_data


class TestSampleSession:
    """The three-message sample exchange parses into the expected variants."""

    def test_parses_three_records(self, sample_raw: dict[str, Any]) -> None:
        session = parse_session(sample_raw)
        assert isinstance(session, Session)
        assert session.chat_logs is not None
        assert len(session.chat_logs) == 3

    def test_hint_record(self, sample_raw: dict[str, Any]) -> None:
        session = parse_session(sample_raw)
        assert session.chat_logs is not None
        hint = session.chat_logs[0].data
        assert type(hint) is HintPrompt
        assert hint.master_id == "greeting"

    def test_answer_record(self, sample_raw: dict[str, Any]) -> None:
        session = parse_session(sample_raw)
        assert session.chat_logs is not None
        record = session.chat_logs[1]
        assert type(record.data) is CandidateAnswer
        assert type(record.data.question) is ChoiceGroupPrompt
        assert record.data.text == ANSWER_TEXT
        assert record.time_taken == 54321.0

    def test_question_record(self, sample_raw: dict[str, Any]) -> None:
        session = parse_session(sample_raw)
        assert session.chat_logs is not None
        mcq = session.chat_logs[2].data
        assert type(mcq) is Prompt
        assert mcq.options is not None
        assert [type(option) for option in mcq.options] == [Option, Option]
        assert [option.text for option in mcq.options] == ["Yes", "No"]


class TestFailures:
    def test_unknown_sender(self, sample_raw: dict[str, Any]) -> None:
        sample_raw["chatLogs"][0]["sender"] = "UNKNOWN"
        with pytest.raises(ValidationError) as exc_info:
            parse_session(sample_raw)
        assert exc_info.value.properties == ["chatLogs[0].sender"]
        assert "chatLogs[0].sender" in str(exc_info.value)

    def test_default_title_names_session(self, sample_raw: dict[str, Any]) -> None:
        sample_raw["chatLogs"][0]["sender"] = "UNKNOWN"
        with pytest.raises(ValidationError, match=r"^The following field values do not meet constraints in Session: "):
            parse_session(sample_raw)

    def test_custom_title(self, sample_raw: dict[str, Any]) -> None:
        sample_raw["chatLogs"][0]["sender"] = "UNKNOWN"
        with pytest.raises(ValidationError, match=r"^Bad log: "):
            parse_session(sample_raw, ParserSettings(error_title="Bad log"))

    def test_transform_error_skips_validation(self) -> None:
        with patch.object(Validator, "check") as check, pytest.raises(TransformError):
            parse_session({"chatLogs": "nope"})
        check.assert_not_called()

    def test_transform_error_message_names_session(self) -> None:
        with pytest.raises(TransformError, match=r"^Parsing object to Session failed: "):
            parse_session(42)


class TestSettings:
    def test_kept_extras_fail_validation(self, sample_raw: dict[str, Any]) -> None:
        settings = ParserSettings(transform=TransformOptions(exclude_extraneous=False))
        with pytest.raises(ValidationError) as exc_info:
            parse_session(sample_raw, settings)
        assert "chatLogs[2].data.usageWhitelist" in exc_info.value.properties

    def test_kept_extras_allowed(self, sample_raw: dict[str, Any]) -> None:
        settings = ParserSettings(
            transform=TransformOptions(exclude_extraneous=False),
            validation=ValidatorOptions(forbid_unknown_fields=False),
        )
        session = parse_session(sample_raw, settings)
        assert session.chat_logs is not None
        assert session.chat_logs[2].data.model_extra == {"usageWhitelist": ["GENERAL_PY", "SENSITIVE"]}


class TestTryParse:
    def test_success(self, sample_raw: dict[str, Any]) -> None:
        result = try_parse_session(sample_raw)
        assert isinstance(result, ParseResult)
        assert result.status == "success"
        assert result.session is not None

    def test_transform_failure(self) -> None:
        result = try_parse_session("not a session")
        assert result.status == "error"
        assert result.is_transform_error

    def test_validation_failure(self) -> None:
        result = try_parse_session({"chatLogs": [agent_record(prompt_data([]))]})
        assert result.is_validation_error
        assert isinstance(result.error, ValidationError)
        assert result.error.properties == ["chatLogs[0].data.types"]


class TestAsync:
    def test_parse_session_async(self, sample_raw: dict[str, Any]) -> None:
        session = asyncio.run(parse_session_async(sample_raw))
        assert session.chat_logs is not None
        assert len(session.chat_logs) == 3

    def test_from_object(self, sample_raw: dict[str, Any]) -> None:
        session = asyncio.run(Session.from_object(sample_raw))
        assert isinstance(session, Session)

    def test_from_object_raises_validation_error(self, sample_raw: dict[str, Any]) -> None:
        sample_raw["chatLogs"][1]["data"]["text"] = ""
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(Session.from_object(sample_raw))
        assert exc_info.value.properties == ["chatLogs[1].data.text"]

    def test_gathered_parses_are_independent(self, sample_raw: dict[str, Any]) -> None:
        async def parse_many() -> list[Session]:
            return await asyncio.gather(*(parse_session_async(sample_raw) for _ in range(5)))

        sessions = asyncio.run(parse_many())
        assert len({id(session) for session in sessions}) == 5


class TestCheck:
    def test_check_valid_session(self, sample_raw: dict[str, Any]) -> None:
        session = transform(Session, sample_raw)
        assert session.check() is session
        assert check_session(session) is session

    def test_check_after_mutation(self, sample_raw: dict[str, Any]) -> None:
        session = parse_session(sample_raw)
        assert session.chat_logs is not None
        session.chat_logs[1].data.text = ""
        with pytest.raises(ValidationError) as exc_info:
            session.check()
        assert exc_info.value.properties == ["chatLogs[1].data.text"]


class TestThreads:
    """Parses on independent inputs can run from several threads at once."""

    def test_parallel_parses_match_sequential(self, sample_raw: dict[str, Any]) -> None:
        expected = to_plain(parse_session(sample_raw))
        raws = [sample_raw for _ in range(16)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            sessions = list(pool.map(parse_session, raws))

        assert len({id(session) for session in sessions}) == 16
        assert all(to_plain(session) == expected for session in sessions)

    def test_parallel_failures_stay_per_call(self, sample_raw: dict[str, Any]) -> None:
        broken = {"chatLogs": [agent_record(prompt_data(), sender="UNKNOWN")]}
        raws = [sample_raw if index % 2 == 0 else broken for index in range(12)]

        with ThreadPoolExecutor(max_workers=6) as pool:
            results = list(pool.map(try_parse_session, raws))

        assert [result.status for result in results] == ["success", "error"] * 6
        for result in results[1::2]:
            assert isinstance(result.error, ValidationError)
            assert result.error.properties == ["chatLogs[0].sender"]
