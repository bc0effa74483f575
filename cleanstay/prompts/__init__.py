"""Prompt templates shipped next to this module as .txt files."""

from functools import lru_cache
from pathlib import Path

_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
    """Prompt ``name`` (no extension), read once per process."""
    return (_DIR / f"{name}.txt").read_text(encoding="utf-8").strip()
