import logging
import os

from cleanstay.domain.language_model import LanguageModel

log = logging.getLogger(__name__)


def create_language_model(provider: str | None = None) -> LanguageModel | None:
    """
    Factory: create the language model adapter based on config.

    The provider can be passed explicitly or read from the LLM_PROVIDER
    env var ("anthropic", "openai", "simulator" or "none").  Without
    either, the first API key found decides.  Returns None when no model
    is configured; the classifier then runs in its degraded mode.
    """
    provider = provider or os.environ.get("LLM_PROVIDER")
    if not provider:
        if os.environ.get("ANTHROPIC_API_KEY"):
            provider = "anthropic"
        elif os.environ.get("OPENAI_API_KEY"):
            provider = "openai"
        else:
            provider = "none"

    if provider == "anthropic":
        from .claude_model import ClaudeLanguageModel

        return ClaudeLanguageModel(
            api_key=os.environ["ANTHROPIC_API_KEY"],
            model=os.environ.get("ANTHROPIC_MODEL", "claude-haiku-4-5-20251001"),
        )

    if provider == "openai":
        from .openai_model import DEFAULT_BASE_URL, OpenAILanguageModel

        return OpenAILanguageModel(
            api_key=os.environ["OPENAI_API_KEY"],
            model=os.environ.get("OPENAI_MODEL", "gpt-4o-mini"),
            base_url=os.environ.get("OPENAI_BASE_URL", DEFAULT_BASE_URL),
        )

    if provider == "simulator":
        from .simulator_model import SimulatorLanguageModel

        return SimulatorLanguageModel()

    if provider == "none":
        log.warning("No language model configured, messages will be stored as notes")
        return None

    raise ValueError(f"Unknown language model provider: {provider!r}")
