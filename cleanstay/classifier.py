"""
MessageClassifier — free text in, ParsedIntent or ClarificationRequest out.

The language model sits behind a timeout and a schema check.  Whatever
goes wrong there, the worker still gets a reply:

  - no model configured   → low-confidence note carrying the raw text
  - call failed/timed out → "which apartment are you at?"
  - output breaks schema  → "which apartment are you at?"
  - confidence < 0.6      → "please repeat more clearly"

The call is never retried.
"""

import asyncio
import json
import logging
from string import Template

from pydantic import ValidationError

from cleanstay.domain.intent import (
    CONFIDENCE_THRESHOLD,
    ClarificationReason,
    ClarificationRequest,
    ClassificationOutcome,
    IntentClassifier,
    Note,
    ParsedIntent,
    intent_from_dict,
)
from cleanstay.domain.language import detect_language
from cleanstay.domain.language_model import LanguageModel
from cleanstay.domain.replies import reply
from cleanstay.prompts import load_prompt

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
NO_MODEL_CONFIDENCE = 0.5


def build_prompt(text: str, language: str) -> str:
    template = Template(load_prompt("classify_intent"))
    return template.safe_substitute(language=language, message=text)


def strip_code_fences(raw: str) -> str:
    """Remove a Markdown ```json fence if the model wrapped its answer."""
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("```")[1]
        if raw.startswith("json"):
            raw = raw[4:]
    return raw.strip()


class MessageClassifier(IntentClassifier):
    """Intent classifier backed by an injected LanguageModel (or none)."""

    def __init__(
        self,
        model: LanguageModel | None,
        timeout: float = DEFAULT_TIMEOUT,
        threshold: float = CONFIDENCE_THRESHOLD,
    ):
        self._model = model
        self._timeout = timeout
        self._threshold = threshold

    async def classify(
        self, text: str, language_hint: str | None = None
    ) -> ClassificationOutcome:
        language = language_hint or detect_language(text)

        if self._model is None:
            return ParsedIntent(
                payload=Note(text=text),
                confidence=NO_MODEL_CONFIDENCE,
                language=language,
            )

        if not text.strip():
            return ClarificationRequest(
                question=reply("repeat_clearly", language),
                language=language,
                reason="low_confidence",
            )

        try:
            raw = await asyncio.wait_for(
                self._model.complete(build_prompt(text, language)),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            log.warning("classification timed out after %.1fs lang=%s", self._timeout, language)
            return self._fallback(language, "model_failed")
        except Exception as exc:
            log.warning("classification call failed lang=%s: %s", language, exc)
            return self._fallback(language, "model_failed")

        if not isinstance(raw, str):
            log.warning("classification returned no text lang=%s: %r", language, type(raw))
            return self._fallback(language, "invalid_output")

        try:
            intent = intent_from_dict(
                json.loads(strip_code_fences(raw)), default_language=language, raw_text=text
            )
        except (json.JSONDecodeError, ValidationError) as exc:
            log.warning("classification output rejected lang=%s: %s raw=%.80r", language, exc, raw)
            return self._fallback(language, "invalid_output")

        log.debug(
            "classified kind=%s conf=%.2f lang=%s hint=%s",
            intent.kind, intent.confidence, intent.language, intent.property_hint or "-",
        )

        if intent.confidence < self._threshold:
            return ClarificationRequest(
                question=reply("repeat_clearly", intent.language),
                language=intent.language,
                reason="low_confidence",
            )
        return intent

    @staticmethod
    def _fallback(language: str, reason: ClarificationReason) -> ClarificationRequest:
        return ClarificationRequest(
            question=reply("which_property", language),
            language=language,
            reason=reason,
        )
