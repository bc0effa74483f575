"""
Language heuristic — best-guess language of a worker message.

Pure keyword counting over a fixed table.  No model, no side effects.
Czech is the primary market and wins every tie.
"""

PRIMARY_LANGUAGE = "cs"

SUPPORTED_LANGUAGES = ("cs", "uk", "ru", "en", "pl")

# Lower-case fragments; a fragment may match inside a longer word
# ("postel" also counts "postele", "postelí").
_KEYWORDS: dict[str, tuple[str, ...]] = {
    "cs": (
        "úklid", "uklid", "začínám", "zacinam", "hotovo", "došel", "došl",
        "dosel", "byt", "postel", "vyměn", "vymen", "prádlo", "špinav",
        "poznámka", "dokončen", "ahoj",
    ),
    "uk": (
        "прибирання", "починаю", "закінч", "ліжк", "білизн", "змінен",
        "брудн", "квартир",
    ),
    "ru": (
        "уборк", "начинаю", "закончил", "кончил", "кроват", "бель",
        "заменен", "грязн",
    ),
    "en": (
        "cleaning", "starting", "finished", "done", "out of", "bed",
        "changed", "apartment", "apt", "photo",
    ),
    "pl": (
        "sprzątanie", "sprzatanie", "zaczynam", "skończ", "skoncz",
        "gotowe", "brak", "łóżk", "pościel", "mieszkanie", "zdjęcie",
    ),
}


def keyword_hits(text: str) -> dict[str, int]:
    """Number of keyword occurrences per language in ``text``."""
    lower = text.lower()
    return {
        lang: sum(lower.count(word) for word in words)
        for lang, words in _KEYWORDS.items()
    }


def detect_language(text: str) -> str:
    """Return the language with the most keyword hits, or the primary one."""
    hits = keyword_hits(text)
    best = max(hits.values())
    if best == 0:
        return PRIMARY_LANGUAGE
    winners = [lang for lang, count in hits.items() if count == best]
    if len(winners) > 1:
        return PRIMARY_LANGUAGE
    return winners[0]
