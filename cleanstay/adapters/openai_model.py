"""
OpenAILanguageModel — any OpenAI-compatible /chat/completions endpoint.

Plain HTTP via requests; the blocking call runs in a worker thread so
the classifier's asyncio timeout still applies.
"""

import asyncio
import os

import requests

from cleanstay.domain.language_model import LanguageModel

DEFAULT_BASE_URL = "https://api.openai.com/v1"

_SYSTEM = "You are a cleaning service message parser. Always return valid JSON."


class OpenAILanguageModel(LanguageModel):
    """Adapter: OpenAI chat completions over HTTP."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str = DEFAULT_BASE_URL,
        request_timeout: float = 15.0,
    ):
        self._model = model
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._timeout = request_timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key or os.environ['OPENAI_API_KEY']}",
                "Content-Type": "application/json",
            }
        )

    async def complete(self, prompt: str) -> str:
        return await asyncio.to_thread(self._post, prompt)

    def _post(self, prompt: str) -> str:
        resp = self.session.post(
            self._url,
            json={
                "model": self._model,
                "messages": [
                    {"role": "system", "content": _SYSTEM},
                    {"role": "user", "content": prompt},
                ],
                "temperature": 0.1,
                "max_tokens": 500,
            },
            timeout=self._timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        content = data["choices"][0]["message"]["content"]
        if not content:
            raise ValueError("empty completion")
        return content
