"""Shared contracts: enums, entity graph, schema descriptors, errors, results.

This package is a LEAF MODULE with no outbound dependencies to core/engine
(Session.from_object and Session.check import the engine lazily).
Option and settings classes are NOT re-exported here - import them from
chatlog.core.config.

Import patterns:
    from chatlog.contracts import Session, Sender, ValidationError
    from chatlog.core.config import ParserSettings, TransformOptions
"""

from chatlog.contracts.discriminators import (
    is_answer,
    is_button_group_question,
    is_hint,
    resolve_payload_kind,
    resolve_question_kind,
)
from chatlog.contracts.entities import (
    PAYLOAD_TYPES,
    CandidateAnswer,
    ChoiceGroupOption,
    ChoiceGroupPrompt,
    Content,
    Entity,
    ExchangeRecord,
    HintPrompt,
    Option,
    Payload,
    Prompt,
    PromptVariant,
    Rule,
    Session,
    Style,
    Trait,
    Trigger,
    payload_type,
    question_type,
)
from chatlog.contracts.enums import (
    ButtonType,
    PayloadKind,
    QuestionContentType,
    QuestionType,
    RuleName,
    Sender,
)
from chatlog.contracts.errors import (
    DEFAULT_VALIDATION_TITLE,
    VIOLATION_SEPARATOR,
    ChatLogError,
    TransformError,
    ValidationError,
    Violation,
)
from chatlog.contracts.results import ParseResult
from chatlog.contracts.schema import FieldDescriptor, Typed, describe

__all__ = [
    "DEFAULT_VALIDATION_TITLE",
    "PAYLOAD_TYPES",
    "VIOLATION_SEPARATOR",
    "ButtonType",
    "CandidateAnswer",
    "ChatLogError",
    "ChoiceGroupOption",
    "ChoiceGroupPrompt",
    "Content",
    "Entity",
    "ExchangeRecord",
    "FieldDescriptor",
    "HintPrompt",
    "Option",
    "ParseResult",
    "Payload",
    "PayloadKind",
    "Prompt",
    "PromptVariant",
    "QuestionContentType",
    "QuestionType",
    "Rule",
    "RuleName",
    "Sender",
    "Session",
    "Style",
    "Trait",
    "TransformError",
    "Trigger",
    "Typed",
    "ValidationError",
    "Violation",
    "describe",
    "is_answer",
    "is_button_group_question",
    "is_hint",
    "payload_type",
    "question_type",
    "resolve_payload_kind",
    "resolve_question_kind",
]
