# src/chatlog/contracts/entities.py
"""Typed entity graph for recorded chat exchanges.

    Session
      └─ chatLogs: [ExchangeRecord]
            └─ data: CandidateAnswer | Prompt | HintPrompt | ChoiceGroupPrompt
                         └─ question: Prompt | ChoiceGroupPrompt

Entities are pydantic models, but they are NOT built with model_validate.
The Transformer instantiates them with model_construct (no validation, only
declared fields copied) and the Validator checks them afterwards, so a
constraint violation never aborts construction and every violation can be
reported at once.

TRUST BOUNDARY: raw chat logs are external data. Field constraints live in
the annotations below and are enforced only by the Validator.
"""

from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Annotated, Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from chatlog.contracts.discriminators import resolve_payload_kind, resolve_question_kind
from chatlog.contracts.enums import (
    ButtonType,
    PayloadKind,
    QuestionContentType,
    QuestionType,
    RuleName,
    Sender,
)
from chatlog.contracts.schema import FieldDescriptor, Typed, describe

# MongoDB ObjectId shape
MongoId = Annotated[str, StringConstraints(pattern=r"^[0-9a-fA-F]{24}$")]

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]

# Rejects NaN and Infinity; ints are accepted as numbers.
FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]


class Entity(BaseModel):
    """Base class for every chat log entity.

    Features:
    - camelCase wire names (``_id`` where declared explicitly)
    - ``schema_fields`` descriptor mapping built per subclass
    - extras allowed so that a non-whitelisting transform can keep unknown
      keys for the Validator to report
    """

    model_config = ConfigDict(
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=False,
    )

    schema_fields: ClassVar[Mapping[str, FieldDescriptor]] = MappingProxyType({})

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        cls.schema_fields = describe(cls)


class Content(Entity):
    """One block of prompt content (text, voice clip, ...)."""

    value: str
    types: list[QuestionContentType]


class Trait(Entity):
    """A measured trait. ``parent_id`` may reference another Trait."""

    id: MongoId = Field(alias="_id")
    parent_id: str | None = None
    name: str
    description: str | None = None


class Rule(Entity):
    name: RuleName
    type: str
    value: FiniteFloat


class Option(Entity):
    id: str
    value: str
    text: str


class Trigger(Entity):
    action: str


class Style(Entity):
    button_type: ButtonType


class ChoiceGroupOption(Option):
    """An option rendered as a button, with actions fired on selection."""

    triggers: Annotated[list[Trigger], Typed.of(Trigger)]
    style: Annotated[Style, Typed.of(Style)]


class Prompt(Entity):
    """A question presented by the agent.

    ``types`` is a non-empty list of QuestionType tags. HINT and
    BUTTON_GROUP_QUESTION among them select the HintPrompt and
    ChoiceGroupPrompt variants instead of this class.
    """

    kind: ClassVar[PayloadKind] = PayloadKind.QUESTION

    id: MongoId = Field(alias="_id")
    types: Annotated[list[QuestionType], Field(min_length=1)]
    contents: Annotated[list[Content], Typed.of(Content)]
    master_id: str | None = None
    parent_id: MongoId | None = None
    traits: Annotated[list[Trait] | None, Typed.of(Trait)] = None
    rules: Annotated[list[Rule] | None, Typed.of(Rule)] = None
    options: Annotated[list[Option] | None, Typed.of(Option)] = None
    version: FiniteFloat | None = None
    language: str | None = None


class HintPrompt(Prompt):
    """A prompt tagged HINT. Adds no fields."""

    kind: ClassVar[PayloadKind] = PayloadKind.HINT


class ChoiceGroupPrompt(Prompt):
    """A prompt tagged BUTTON_GROUP_QUESTION whose options are buttons."""

    kind: ClassVar[PayloadKind] = PayloadKind.BUTTON_GROUP_QUESTION

    options: Annotated[list[ChoiceGroupOption] | None, Typed.of(ChoiceGroupOption)] = None


PromptVariant = Prompt | HintPrompt | ChoiceGroupPrompt

_QUESTION_TYPES: dict[PayloadKind, type[Prompt]] = {
    PayloadKind.QUESTION: Prompt,
    PayloadKind.BUTTON_GROUP_QUESTION: ChoiceGroupPrompt,
}


def question_type(answer: Any) -> type[Prompt]:
    """Entity class for the question embedded in a raw candidate answer."""
    return _QUESTION_TYPES[resolve_question_kind(answer)]


class CandidateAnswer(Entity):
    """The candidate's reply, embedding the question it answers."""

    kind: ClassVar[PayloadKind] = PayloadKind.ANSWER

    id: NonEmptyStr = Field(alias="_id")
    question: Annotated[Prompt | ChoiceGroupPrompt, Typed(question_type)]
    value: NonEmptyStr
    text: NonEmptyStr


Payload = CandidateAnswer | Prompt | HintPrompt | ChoiceGroupPrompt

PAYLOAD_TYPES: Mapping[PayloadKind, type[Entity]] = MappingProxyType(
    {
        PayloadKind.ANSWER: CandidateAnswer,
        PayloadKind.QUESTION: Prompt,
        PayloadKind.HINT: HintPrompt,
        PayloadKind.BUTTON_GROUP_QUESTION: ChoiceGroupPrompt,
    }
)


def payload_type(record: Any) -> type[Entity]:
    """Entity class for the payload of a raw exchange record."""
    return PAYLOAD_TYPES[resolve_payload_kind(record)]


class ExchangeRecord(Entity):
    """One turn of the exchange.

    ``time`` is optional because older chat logs were recorded without it.
    """

    id: str
    sender: Sender
    label: str | None = None
    data: Annotated[Payload, Typed(payload_type)]
    user_agent: str | None = None
    time_taken: FiniteFloat | None = None
    time: datetime | None = None


class Session(Entity):
    """Root of the graph: an ordered log of exchange records."""

    chat_logs: Annotated[list[ExchangeRecord] | None, Typed.of(ExchangeRecord)] = None

    @classmethod
    async def from_object(cls, raw: Any) -> "Session":
        """Transform and validate a raw session tree.

        Raises:
            TransformError: If the raw tree cannot be coerced.
            ValidationError: If the typed session violates constraints.
        """
        # Import here to avoid circular dependencies
        from chatlog.engine.orchestrator import parse_session_async

        return await parse_session_async(raw)

    def check(self) -> Self:
        """Re-validate this session, raising ValidationError on failure."""
        from chatlog.engine.orchestrator import check_session

        check_session(self)
        return self
