"""
Intent model and IntentClassifier port — understands what the worker is saying.

AI is used here: the classifier reads a chat message and returns
structured data.  The session controller then operates on that data.

Each intent kind has its own payload model carrying only the fields
relevant to that kind, so callers never poke at optional keys.  The same
models validate the language model's JSON answer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Annotated, ClassVar, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    StringConstraints,
    TypeAdapter,
    field_validator,
)

IntentKind = Literal[
    "start_cleaning", "supply_out", "linen_used", "note", "photo_meta", "done"
]

INTENT_KINDS: tuple[str, ...] = (
    "start_cleaning", "supply_out", "linen_used", "note", "photo_meta", "done",
)

CONFIDENCE_THRESHOLD = 0.6

ClarificationReason = Literal["model_failed", "invalid_output", "low_confidence"]

Count = Annotated[StrictInt, Field(ge=0)]
ItemName = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, min_length=1)]


# -- payload variants ---------------------------------------------------------


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class StartCleaning(_Payload):
    kind: ClassVar[str] = "start_cleaning"


class SupplyOut(_Payload):
    kind: ClassVar[str] = "supply_out"
    items: tuple[ItemName, ...] = Field(min_length=1)


class LinenUsed(_Payload):
    kind: ClassVar[str] = "linen_used"
    changed: Count
    dirty: Optional[Count] = None


class Note(_Payload):
    kind: ClassVar[str] = "note"
    text: StrictStr = ""


class PhotoMeta(_Payload):
    kind: ClassVar[str] = "photo_meta"
    description: Optional[StrictStr] = None
    url: Optional[StrictStr] = None


class Done(_Payload):
    kind: ClassVar[str] = "done"


IntentPayload = Union[StartCleaning, SupplyOut, LinenUsed, Note, PhotoMeta, Done]


@dataclass(frozen=True)
class ParsedIntent:
    """Structured output of classification: data only, no raw text."""
    payload: IntentPayload
    confidence: float                  # 0.0–1.0
    language: str                      # e.g. "cs"
    property_hint: str | None = None   # e.g. "302" from "Začínám úklid bytu 302"

    @property
    def kind(self) -> str:
        return self.payload.kind


@dataclass(frozen=True)
class ClarificationRequest:
    """A question to send back instead of an intent we cannot trust."""
    question: str
    language: str
    reason: ClarificationReason = "model_failed"


ClassificationOutcome = Union[ParsedIntent, ClarificationRequest]


class IntentClassifier(ABC):
    """
    Port: classify a worker message into a structured intent.

    The production implementation asks a language model
    (cleanstay.classifier.MessageClassifier); tests may substitute any
    fake that honours the same contract.
    """

    @abstractmethod
    async def classify(
        self, text: str, language_hint: str | None = None
    ) -> ClassificationOutcome:
        """Classify a single message.  Never raises for model problems."""
        ...


# -- model answer -------------------------------------------------------------


class _Answer(BaseModel):
    """Fields every answer carries, whatever its type."""
    property_hint: Optional[StrictStr] = None
    language: Optional[str] = None
    confidence: float = Field(strict=True, ge=0.0, le=1.0)

    @field_validator("payload", mode="before", check_fields=False)
    @classmethod
    def _null_payload(cls, value):
        return {} if value is None else value


class StartCleaningAnswer(_Answer):
    type: Literal["start_cleaning"]
    payload: StartCleaning = Field(default_factory=StartCleaning)


class SupplyOutAnswer(_Answer):
    type: Literal["supply_out"]
    payload: SupplyOut


class LinenUsedAnswer(_Answer):
    type: Literal["linen_used"]
    payload: LinenUsed


class NoteAnswer(_Answer):
    type: Literal["note"]
    payload: Note = Field(default_factory=Note)


class PhotoMetaAnswer(_Answer):
    type: Literal["photo_meta"]
    payload: PhotoMeta = Field(default_factory=PhotoMeta)


class DoneAnswer(_Answer):
    type: Literal["done"]
    payload: Done = Field(default_factory=Done)


IntentAnswer = Annotated[
    Union[
        StartCleaningAnswer, SupplyOutAnswer, LinenUsedAnswer,
        NoteAnswer, PhotoMetaAnswer, DoneAnswer,
    ],
    Field(discriminator="type"),
]

_ANSWER = TypeAdapter(IntentAnswer)


def payload_to_dict(payload: IntentPayload) -> dict:
    return payload.model_dump(mode="json")


def intent_from_dict(data, default_language: str, raw_text: str = "") -> ParsedIntent:
    """
    Validate a decoded model response and turn it into a ParsedIntent.

    Raises pydantic.ValidationError on any deviation from the schema.
    A note without text keeps the raw message instead.
    """
    answer = _ANSWER.validate_python(data)

    payload = answer.payload
    if isinstance(payload, Note) and not payload.text:
        payload = Note(text=raw_text)

    hint = answer.property_hint.strip() if answer.property_hint else ""
    return ParsedIntent(
        payload=payload,
        confidence=float(answer.confidence),
        language=answer.language or default_language,
        property_hint=hint or None,
    )


# -- routing helpers ----------------------------------------------------------


def is_actionable(intent: ParsedIntent) -> bool:
    """True for confident intents that change what the office should do."""
    return intent.confidence > 0.7 and intent.kind in (
        "start_cleaning", "supply_out", "done",
    )


def message_priority(intent: ParsedIntent) -> Literal["low", "medium", "high"]:
    if intent.kind == "supply_out":
        return "high"
    if intent.kind in ("done", "start_cleaning"):
        return "medium"
    return "low"
