"""
Conversational outcomes that stop a state transition.

None of these is a server fault.  Each carries a ready-to-send reply in
the worker's language, so the chat layer can answer without knowing
which error it got.
"""

from cleanstay.domain.replies import reply


class CleanStayError(Exception):
    """Base class: a domain outcome with a localized chat reply."""

    def __init__(self, reply_text: str, language: str | None = None):
        super().__init__(reply_text)
        self.reply = reply_text
        self.language = language


class SessionConflict(CleanStayError):
    """The worker already has an open session somewhere else."""

    def __init__(self, current_property_name: str, language: str | None = None):
        super().__init__(
            reply("conflict", language, property=current_property_name), language
        )
        self.current_property_name = current_property_name


class PropertyNotFound(CleanStayError):
    def __init__(self, hint: str, language: str | None = None):
        super().__init__(reply("not_found", language, hint=hint), language)
        self.hint = hint


class PropertyAmbiguous(CleanStayError):
    def __init__(self, candidate_names: list[str], language: str | None = None):
        super().__init__(
            reply("ambiguous", language, names=", ".join(candidate_names)), language
        )
        self.candidate_names = candidate_names


class NoActiveSession(CleanStayError):
    """An event or close arrived while nothing is open for the worker."""

    def __init__(self, reply_text: str, language: str | None = None):
        super().__init__(reply_text, language)

    @classmethod
    def for_event(cls, language: str | None = None) -> "NoActiveSession":
        return cls(reply("missing_hint", language), language)

    @classmethod
    def for_close(cls, language: str | None = None) -> "NoActiveSession":
        return cls(reply("close_without_session", language), language)


class MissingPropertyHint(CleanStayError):
    """A start message did not say which property the worker is at."""

    def __init__(self, language: str | None = None):
        super().__init__(reply("missing_hint", language), language)
