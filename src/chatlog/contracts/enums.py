"""Enumerated vocabulary shared by every chat log entity.

The string values are the wire contract: raw input must carry them
literally (e.g. sender is exactly "AGENT" or "CANDIDATE").

All enums are StrEnum so that raw strings compare equal to members. This
lets the discriminator functions inspect untyped input and typed entities
with the same comparisons.
"""

from enum import StrEnum


class Sender(StrEnum):
    """Who produced an exchange record."""

    AGENT = "AGENT"
    CANDIDATE = "CANDIDATE"


class PayloadKind(StrEnum):
    """Concrete variant selected for a polymorphic payload slot.

    Returned by the discriminator functions and carried by each variant
    class as its ``kind`` class attribute.
    """

    ANSWER = "Answer"
    QUESTION = "Question"
    HINT = "Hint"
    BUTTON_GROUP_QUESTION = "ButtonGroupQuestion"


class QuestionType(StrEnum):
    """Type tags attached to a prompt.

    HINT and BGQ double as discriminators for the payload variant.
    """

    HINT = "HINT"
    FTQ = "FTQ"
    MCQ = "MCQ"
    VOICE = "VOICE"
    VIDEO = "VIDEO"
    SLIDER = "SLIDER"
    DROPDOWN = "DROPDOWN"
    BGQ = "BUTTON_GROUP_QUESTION"


class QuestionContentType(StrEnum):
    """Media kind of a single content block."""

    TEXT = "TEXT"
    VOICE = "VOICE"
    VIDEO = "VIDEO"
    SLIDER = "SLIDER"


class RuleName(StrEnum):
    """Recognised prompt rule names."""

    MAX_TEXT_LENGTH = "maxTextLength"
    MIN_TEXT_LENGTH = "minTextLength"
    RECOMMENDED_TEXT_LENGTH = "recommendedTextLength"
    MIN_VOICE_SECONDS = "minVoiceSeconds"
    MAX_VOICE_SECONDS = "maxVoiceSeconds"
    RECOMMENDED_VOICE_SECONDS = "recommendedVoiceSeconds"


class ButtonType(StrEnum):
    """Visual style of a choice group button."""

    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"
    DEFAULT = "DEFAULT"
