"""
LanguageModel port — plain text in, plain text out.

The classifier owns prompting, timeouts and validation; adapters only
transport a prompt to a model and return whatever text comes back.
Deployments without any model simply pass None instead of an adapter.
"""

from abc import ABC, abstractmethod


class LanguageModel(ABC):

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Return the raw completion text for ``prompt``.  May raise anything."""
        ...
