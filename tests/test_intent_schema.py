"""
Validation of raw model output into the closed intent variants.
"""

import pytest
from pydantic import ValidationError

from cleanstay.domain.intent import (
    Done,
    LinenUsed,
    Note,
    ParsedIntent,
    PhotoMeta,
    StartCleaning,
    SupplyOut,
    intent_from_dict,
    is_actionable,
    message_priority,
    payload_to_dict,
)


def test_start_cleaning_keeps_hint():
    intent = intent_from_dict(
        {"type": "start_cleaning", "property_hint": " 302 ", "confidence": 0.95}, "cs"
    )
    assert intent.payload == StartCleaning()
    assert intent.property_hint == "302"
    assert intent.language == "cs"


def test_supply_items_keep_order():
    intent = intent_from_dict(
        {"type": "supply_out", "payload": {"items": ["Domestos", "Jar"]}, "confidence": 0.9},
        "cs",
    )
    assert intent.payload == SupplyOut(items=("Domestos", "Jar"))
    assert payload_to_dict(intent.payload) == {"items": ["Domestos", "Jar"]}


def test_linen_used_dirty_optional():
    intent = intent_from_dict(
        {"type": "linen_used", "payload": {"changed": 5}, "confidence": 0.9}, "en"
    )
    assert intent.payload == LinenUsed(changed=5, dirty=None)


def test_note_without_text_falls_back_to_raw_message():
    intent = intent_from_dict({"type": "note", "confidence": 0.8}, "cs", raw_text="klíče v zásuvce")
    assert intent.payload == Note(text="klíče v zásuvce")


def test_photo_meta_fields():
    intent = intent_from_dict(
        {"type": "photo_meta", "payload": {"description": "po úklidu"}, "confidence": 0.8}, "cs"
    )
    assert intent.payload == PhotoMeta(description="po úklidu", url=None)


def test_model_language_wins_over_default():
    intent = intent_from_dict({"type": "done", "language": "uk", "confidence": 0.95}, "cs")
    assert intent.payload == Done()
    assert intent.language == "uk"


def test_null_payload_treated_as_empty():
    intent = intent_from_dict({"type": "done", "payload": None, "confidence": 0.95}, "cs")
    assert intent.payload == Done()


def test_supply_items_are_stripped():
    intent = intent_from_dict(
        {"type": "supply_out", "payload": {"items": [" Jar "]}, "confidence": 0.9}, "cs"
    )
    assert intent.payload.items == ("Jar",)


def test_blank_hint_becomes_none():
    intent = intent_from_dict({"type": "done", "property_hint": "  ", "confidence": 0.9}, "cs")
    assert intent.property_hint is None


def test_confidence_zero_and_one_accepted():
    assert intent_from_dict({"type": "done", "confidence": 0}, "cs").confidence == 0.0
    assert intent_from_dict({"type": "done", "confidence": 1}, "cs").confidence == 1.0


@pytest.mark.parametrize(
    "data",
    [
        [],
        "done",
        {"type": "dance", "confidence": 0.9},
        {"type": "done"},
        {"type": "done", "confidence": "high"},
        {"type": "done", "confidence": True},
        {"type": "done", "confidence": 1.2},
        {"type": "done", "confidence": -0.1},
        {"type": "done", "confidence": 0.9, "payload": ["x"]},
        {"type": "done", "confidence": 0.9, "property_hint": 302},
        {"type": "supply_out", "confidence": 0.9},
        {"type": "supply_out", "confidence": 0.9, "payload": {"items": "Domestos, Jar"}},
        {"type": "supply_out", "confidence": 0.9, "payload": {"items": ["Jar", 3]}},
        {"type": "supply_out", "confidence": 0.9, "payload": {"items": []}},
        {"type": "supply_out", "confidence": 0.9, "payload": {"items": ["  "]}},
        {"type": "linen_used", "confidence": 0.9, "payload": {"changed": -1}},
        {"type": "linen_used", "confidence": 0.9, "payload": {"changed": True}},
        {"type": "linen_used", "confidence": 0.9, "payload": {"changed": "6"}},
        {"type": "linen_used", "confidence": 0.9, "payload": {"changed": 6.5}},
        {"type": "linen_used", "confidence": 0.9, "payload": {"changed": 6, "dirty": "8"}},
        {"type": "photo_meta", "confidence": 0.9, "payload": {"url": 12}},
    ],
)
def test_schema_violations_rejected(data):
    with pytest.raises(ValidationError):
        intent_from_dict(data, "cs")


def _intent(payload, confidence=0.9) -> ParsedIntent:
    return ParsedIntent(payload=payload, confidence=confidence, language="cs")


def test_is_actionable():
    assert is_actionable(_intent(StartCleaning(), 0.8))
    assert is_actionable(_intent(SupplyOut(items=("Jar",)), 0.9))
    assert not is_actionable(_intent(Note(text="x"), 0.9))
    assert not is_actionable(_intent(Done(), 0.7))


def test_message_priority():
    assert message_priority(_intent(SupplyOut(items=("Jar",)))) == "high"
    assert message_priority(_intent(Done())) == "medium"
    assert message_priority(_intent(StartCleaning())) == "medium"
    assert message_priority(_intent(PhotoMeta())) == "low"
