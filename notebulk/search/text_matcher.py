"""Unicode-aware comparison of note text against a search query."""

import re
import unicodedata
from functools import lru_cache

import structlog

from notebulk.search.search_models import MatchMode, SearchCriteria
from notebulk.utils.error_handler import safe_with_default

logger = structlog.get_logger(__name__)

_LOCALE_PATTERN = re.compile(r"^[A-Za-z]{2,3}(?:[-_][A-Za-z0-9]{1,8})*$")
_TURKIC_LANGUAGES = frozenset({"tr", "az"})

# A letter or digit in any script; underscore counts as a boundary
_WORD_CHAR = r"[^\W_]"


@safe_with_default("apply locale case rules", default_value=None, level="debug")
def _tailored_fold(text: str, locale: str) -> str | None:
    if not _LOCALE_PATTERN.match(locale):
        raise ValueError(f"Unrecognized locale {locale!r}")

    language = re.split(r"[-_]", locale, maxsplit=1)[0].lower()
    if language in _TURKIC_LANGUAGES:
        # Dotted capital I arrives decomposed after NFD
        text = (
            text.replace("I\u0307", "i").replace("\u0130", "i").replace("I", "\u0131")
        )
    return text.casefold()


def fold_case(text: str, locale: str | None) -> str:
    """Case fold ``text`` using the rules of ``locale``.

    Unknown locales fall back to the locale-agnostic fold.
    """
    if not locale:
        return text.casefold()
    folded = _tailored_fold(text, locale)
    return folded if folded is not None else text.casefold()


def strip_accents(text: str) -> str:
    """Remove combining marks from decomposed text."""
    return "".join(ch for ch in text if unicodedata.category(ch) != "Mn")


@lru_cache(maxsize=256)
def _whole_word_pattern(query: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!{_WORD_CHAR}){re.escape(query)}(?!{_WORD_CHAR})")


class TextMatcher:
    """Decides whether a note's text satisfies a text query."""

    def normalize(self, text: str, criteria: SearchCriteria) -> str:
        value = unicodedata.normalize("NFD", text)
        if criteria.ignore_accents:
            value = strip_accents(value)
        if not criteria.case_sensitive:
            value = fold_case(value, criteria.locale)
        # Recompose so kept accents stay part of their letter
        return unicodedata.normalize("NFC", value)

    def matches(self, note_text: str, query: str, criteria: SearchCriteria) -> bool:
        """Compare ``note_text`` with ``query`` under ``criteria.match_mode``."""
        query = (query or "").strip()
        if not query or not note_text:
            return False

        text = self.normalize(note_text, criteria)
        needle = self.normalize(query, criteria)

        if criteria.match_mode == MatchMode.EXACT:
            return text == needle
        if criteria.match_mode == MatchMode.WHOLE_WORD:
            return _whole_word_pattern(needle).search(text) is not None
        return needle in text
