"""
SimulatorLanguageModel — deterministic keyword-based stand-in for an LLM.

No network.  It reads the worker message out of the classification
prompt and answers with the same JSON shape a real model would, so the
classifier's parsing and validation run for real in tests.

Test helpers:
    script(raw)         queue a canned raw reply for the next call
    fail_with(exc)      make the next call raise exc
    delay               seconds to sleep before answering
    prompts             every prompt received, in order
"""

import asyncio
import json
import re

from cleanstay.domain.language_model import LanguageModel

_MESSAGE = re.compile(r"<message>\n?(.*?)\n?</message>", re.DOTALL)

_DONE = ["hotovo", "dokončen", "dokoncen", "finished", "done", "закінчив", "закінчила",
         "готово", "закончил", "gotowe", "skończył"]
_START = ["začínám", "zacínám", "zacinam", "starting", "start cleaning", "починаю",
          "начинаю", "zaczynam"]
_SUPPLY = ["došel", "došl", "dosel", "dosl", "out of", "закінчилось", "закінчився",
           "закончилось", "закончился", "brak", "zabrakło"]
_BEDS = ["postel", "postele", "bed", "ліжк", "кроват", "łóżk"]
_DIRTY = ["špinav", "spinav", "dirty", "брудн", "грязн", "brudn"]

_FILLER = {"úklid", "uklid", "bytu", "byt", "apt", "apartment", "cleaning", "at",
           "прибирання", "квартири", "уборку", "квартиры", "sprzątanie", "mieszkania"}

_ITEM_SPLIT = re.compile(r"\s*,\s*|\s+(?:a|and|і|и|i)\s+", re.IGNORECASE)
_INT = re.compile(r"\d+")


def _find(lower: str, words: list[str]) -> int:
    """Index just past the first keyword found, or -1."""
    for w in words:
        pos = lower.find(w)
        if pos >= 0:
            return pos + len(w)
    return -1


def _hint(text: str, after: int) -> str | None:
    numbers = _INT.findall(text)
    if numbers:
        return numbers[-1]
    tokens = [t.strip(".,!?") for t in text[after:].split()]
    tokens = [t for t in tokens if t and t.lower() not in _FILLER]
    return tokens[-1] if tokens else None


def _after_colon(text: str) -> str:
    return text.split(":", 1)[1].strip() if ":" in text else text.strip()


def simulate(message: str) -> dict:
    """Keyword classification of one message into the model's JSON shape."""
    text = message.strip()
    lower = text.lower()

    end = _find(lower, _SUPPLY)
    if end >= 0:
        items = [i.strip(" .!") for i in _ITEM_SPLIT.split(text[end:].strip()) if i.strip(" .!")]
        if items:
            return {"type": "supply_out", "payload": {"items": items}, "confidence": 0.9}

    if any(w in lower for w in _BEDS):
        numbers = [int(n) for n in _INT.findall(text)]
        if numbers:
            payload = {"changed": numbers[0]}
            if len(numbers) > 1 and any(w in lower for w in _DIRTY):
                payload["dirty"] = numbers[1]
            return {"type": "linen_used", "payload": payload, "confidence": 0.9}

    end = _find(lower, _START)
    if end >= 0:
        return {"type": "start_cleaning", "property_hint": _hint(text, end), "confidence": 0.95}

    if _find(lower, _DONE) >= 0:
        result = {"type": "done", "confidence": 0.95}
        numbers = _INT.findall(text)
        if numbers:
            result["property_hint"] = numbers[-1]
        return result

    if lower.startswith(("foto", "photo", "фото", "zdjęcie")):
        return {"type": "photo_meta", "payload": {"description": _after_colon(text)}, "confidence": 0.8}

    if lower.startswith(("poznámka", "note", "примітка", "заметка", "notatka")):
        return {"type": "note", "payload": {"text": _after_colon(text)}, "confidence": 0.8}

    return {"type": "note", "payload": {"text": text}, "confidence": 0.3}


class SimulatorLanguageModel(LanguageModel):
    """Keyword-based model for tests and local development."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.prompts: list[str] = []
        self._scripted: list[str] = []
        self._failure: Exception | None = None

    def script(self, raw: str) -> None:
        self._scripted.append(raw)

    def fail_with(self, exc: Exception) -> None:
        self._failure = exc

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self._failure is not None:
            exc, self._failure = self._failure, None
            raise exc
        if self._scripted:
            return self._scripted.pop(0)
        m = _MESSAGE.search(prompt)
        message = m.group(1) if m else ""
        return json.dumps(simulate(message), ensure_ascii=False)
