"""
Main processing pipeline.

Wires the classifier to the session controller following the plan:
  AI → data → code

Flow for one inbound chat message:
  1. AI: classify text → ParsedIntent | ClarificationRequest
  2. Code: a clarification goes straight back to the worker
  3. Code: route the intent
       start_cleaning → controller.open()
       done           → controller.close(reason="done")
       anything else  → controller.append_event()
  4. Every outcome, success or refusal, carries a chat-ready reply.

A done message closes through close() only, which writes the single done
event; routing it through append_event() as well would record it twice.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from cleanstay.controller import SessionController
from cleanstay.domain.errors import CleanStayError
from cleanstay.domain.intent import (
    ClarificationRequest,
    IntentClassifier,
    ParsedIntent,
    is_actionable,
    message_priority,
)
from cleanstay.domain.replies import reply

log = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    action: Literal[
        "clarification",    # classifier asked a question instead
        "session_opened",   # start_cleaning accepted
        "event_recorded",   # supply_out / linen_used / note / photo_meta stored
        "session_closed",   # done accepted
        "rejected",         # controller refused; reply explains why
    ]
    reply: str
    language: str
    session_id: str = ""
    event_id: str = ""
    intent: ParsedIntent | None = None


class Pipeline:
    """
    Stateless step: process one worker message.

    Call process_message() for each inbound chat message; the caller
    sends result.reply back over whatever chat transport it uses.
    """

    def __init__(self, classifier: IntentClassifier, controller: SessionController):
        self._classifier = classifier
        self._controller = controller

    async def process_message(
        self,
        tenant_id: str,
        worker_id: str,
        text: str,
        language_hint: str | None = None,
    ) -> PipelineResult:
        log.debug("tenant=%s worker=%s message=%.60r", tenant_id, worker_id, text)

        outcome = await self._classifier.classify(text, language_hint)

        if isinstance(outcome, ClarificationRequest):
            log.info("tenant=%s worker=%s clarification (%s)", tenant_id, worker_id, outcome.reason)
            return PipelineResult(
                action="clarification", reply=outcome.question, language=outcome.language,
            )

        intent = outcome
        language = intent.language
        log.info("tenant=%s worker=%s intent=%s priority=%s actionable=%s",
                 tenant_id, worker_id, intent.kind, message_priority(intent), is_actionable(intent))
        try:
            if intent.kind == "start_cleaning":
                ref = await self._controller.open(
                    tenant_id, worker_id, intent.property_hint, language
                )
                return PipelineResult(
                    action="session_opened",
                    reply=reply("session_opened", language, property=ref.property_name or ""),
                    language=language,
                    session_id=ref.session_id,
                    intent=intent,
                )

            if intent.kind == "done":
                ref = await self._controller.close(tenant_id, worker_id, "done", language)
                return PipelineResult(
                    action="session_closed",
                    reply=reply("session_closed", language),
                    language=language,
                    session_id=ref.session_id,
                    intent=intent,
                )

            event = await self._controller.append_event(tenant_id, worker_id, intent, language)
            return PipelineResult(
                action="event_recorded",
                reply=reply("event_recorded", language),
                language=language,
                session_id=event.session_id,
                event_id=event.event_id,
                intent=intent,
            )
        except CleanStayError as err:
            log.info("tenant=%s worker=%s %s → %s",
                     tenant_id, worker_id, intent.kind, type(err).__name__)
            return PipelineResult(
                action="rejected", reply=err.reply, language=language, intent=intent,
            )
