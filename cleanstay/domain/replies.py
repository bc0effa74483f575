"""
Localized chat replies.

Every outcome the core produces, success or failure, ends up as a chat
message to the worker.  The texts live here, keyed by reply name and
language code.  Unknown languages fall back to the primary locale.
"""

from cleanstay.domain.language import PRIMARY_LANGUAGE

_REPLIES: dict[str, dict[str, str]] = {
    "which_property": {
        "cs": "U kterého bytu jsi?",
        "uk": "У якій ви квартирі?",
        "ru": "В какой вы квартире?",
        "en": "Which apartment are you at?",
        "pl": "W którym mieszkaniu jesteś?",
    },
    "repeat_clearly": {
        "cs": "Nerozuměl jsem, napiš to prosím jasněji.",
        "uk": "Не зрозумів, напишіть, будь ласка, чіткіше.",
        "ru": "Не понял, напишите, пожалуйста, понятнее.",
        "en": "Sorry, I didn't get that. Could you please repeat it more clearly?",
        "pl": "Nie zrozumiałem, napisz to proszę wyraźniej.",
    },
    "missing_hint": {
        "cs": 'U kterého bytu jsi? Napiš "Začínám úklid ..."',
        "uk": 'У якій ви квартирі? Напишіть "Починаю прибирання ..."',
        "ru": 'В какой вы квартире? Напишите "Начинаю уборку ..."',
        "en": 'Which apartment are you at? Say "Starting cleaning at ..."',
        "pl": 'W którym mieszkaniu jesteś? Napisz "Zaczynam sprzątanie ..."',
    },
    "close_without_session": {
        "cs": "U kterého bytu ukončuješ?",
        "uk": "Яку квартиру ви завершуєте?",
        "ru": "Какую квартиру вы заканчиваете?",
        "en": "Which property are you ending?",
        "pl": "Które mieszkanie kończysz?",
    },
    "conflict": {
        "cs": "Mám ukončit předchozí ({property}) a pokračovat tady?",
        "uk": "Завершити попереднє прибирання ({property}) і продовжити тут?",
        "ru": "Завершить предыдущую уборку ({property}) и продолжить здесь?",
        "en": "Should I end the previous session at {property} and continue here?",
        "pl": "Czy zakończyć poprzednie sprzątanie ({property}) i kontynuować tutaj?",
    },
    "not_found": {
        "cs": "Byt '{hint}' nenalezen",
        "uk": "Квартиру '{hint}' не знайдено",
        "ru": "Квартира '{hint}' не найдена",
        "en": "Property '{hint}' not found",
        "pl": "Nie znaleziono mieszkania '{hint}'",
    },
    "ambiguous": {
        "cs": "Myslíš {names}?",
        "uk": "Ви маєте на увазі {names}?",
        "ru": "Вы имеете в виду {names}?",
        "en": "Did you mean {names}?",
        "pl": "Czy chodzi o {names}?",
    },
    "session_opened": {
        "cs": "Zapsáno: začátek úklidu ({property}).",
        "uk": "Записано: початок прибирання ({property}).",
        "ru": "Записано: начало уборки ({property}).",
        "en": "Noted: cleaning started at {property}.",
        "pl": "Zapisano: początek sprzątania ({property}).",
    },
    "event_recorded": {
        "cs": "Zapsáno.",
        "uk": "Записано.",
        "ru": "Записано.",
        "en": "Noted.",
        "pl": "Zapisano.",
    },
    "session_closed": {
        "cs": "Díky, úklid je uzavřen.",
        "uk": "Дякуємо, прибирання завершено.",
        "ru": "Спасибо, уборка завершена.",
        "en": "Thanks, the cleaning is closed.",
        "pl": "Dzięki, sprzątanie zakończone.",
    },
}


def reply(key: str, language: str | None = None, **params: str) -> str:
    """Render reply ``key`` in ``language``, falling back to the primary locale."""
    texts = _REPLIES[key]
    template = texts.get(language or PRIMARY_LANGUAGE) or texts[PRIMARY_LANGUAGE]
    return template.format(**params)
