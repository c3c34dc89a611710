# src/chatlog/contracts/discriminators.py
"""Variant resolution for polymorphic payload slots.

A payload's concrete type cannot be read off its own shape. It is decided
by sibling fields of the still-raw parent node:

    ExchangeRecord.data (first match wins):
        sender == CANDIDATE          -> Answer
        data.types contains HINT     -> Hint
        data.types contains BGQ      -> ButtonGroupQuestion
        otherwise                    -> Question

    CandidateAnswer.question:
        question.types contains BGQ  -> ButtonGroupQuestion
        otherwise                    -> Question

The answer's question has no HINT arm. A question tagged both HINT and
BUTTON_GROUP_QUESTION resolves to Hint as a record payload but to
ButtonGroupQuestion when embedded in an answer.

Every function here is pure and total: it accepts any value (mapping,
entity instance, None, garbage) and never raises. Missing or malformed
fields behave as "does not contain".
"""

from collections.abc import Mapping
from typing import Any

from chatlog.contracts.enums import PayloadKind, QuestionType, Sender


def _field(node: Any, name: str) -> Any:
    """Read a field from a raw mapping or a typed entity."""
    if isinstance(node, Mapping):
        return node.get(name)
    return getattr(node, name, None)


def _type_tags(node: Any) -> tuple[Any, ...]:
    tags = _field(node, "types")
    if isinstance(tags, (list, tuple)):
        return tuple(tags)
    return ()


def is_hint(data: Any) -> bool:
    """True if the payload's type tags contain HINT."""
    return QuestionType.HINT in _type_tags(data)


def is_button_group_question(data: Any) -> bool:
    """True if the payload's type tags contain the button-group tag."""
    return QuestionType.BGQ in _type_tags(data)


def is_answer(record: Any) -> bool:
    """True if the exchange record was sent by the candidate."""
    return bool(_field(record, "sender") == Sender.CANDIDATE)


def resolve_payload_kind(record: Any) -> PayloadKind:
    """Select the payload variant for an exchange record.

    Args:
        record: The raw exchange record (the parent of ``data``).

    Returns:
        Exactly one PayloadKind. QUESTION is the total fallback.
    """
    if is_answer(record):
        return PayloadKind.ANSWER
    data = _field(record, "data")
    if is_hint(data):
        return PayloadKind.HINT
    if is_button_group_question(data):
        return PayloadKind.BUTTON_GROUP_QUESTION
    return PayloadKind.QUESTION


def resolve_question_kind(answer: Any) -> PayloadKind:
    """Select the variant of the question embedded in a candidate answer.

    Args:
        answer: The raw candidate answer (the parent of ``question``).

    Returns:
        BUTTON_GROUP_QUESTION or QUESTION.
    """
    if is_button_group_question(_field(answer, "question")):
        return PayloadKind.BUTTON_GROUP_QUESTION
    return PayloadKind.QUESTION
