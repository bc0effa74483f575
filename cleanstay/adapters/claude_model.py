"""
ClaudeLanguageModel — sends classification prompts to the Claude API.

The prompt itself comes from the classifier; this adapter only adds the
system instruction and unwraps the first text block of the reply.
"""

import os

import anthropic

from cleanstay.domain.language_model import LanguageModel

_SYSTEM = "You are a cleaning service message parser. Always return valid JSON."


class ClaudeLanguageModel(LanguageModel):
    """Language model backed by Claude Haiku (fast + cheap)."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-haiku-4-5-20251001",
        request_timeout: float = 15.0,
    ):
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key or os.environ["ANTHROPIC_API_KEY"],
            timeout=request_timeout,
            max_retries=0,
        )
        self._model = model

    async def complete(self, prompt: str) -> str:
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=500,
            temperature=0.1,
            system=_SYSTEM,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.content[0].text
