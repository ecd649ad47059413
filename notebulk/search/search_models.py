"""Search-related data models."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class MatchMode(str, Enum):
    """Text comparison strategy."""

    SUBSTRING = "substring"
    WHOLE_WORD = "wholeWord"
    EXACT = "exact"


@dataclass
class DateRange:
    """Inclusive range of local calendar days. Either bound may be open."""

    start: date | str | None = None
    end: date | str | None = None

    def __post_init__(self) -> None:
        # Accept YYYY-MM-DD strings from configuration and the command line
        if isinstance(self.start, str):
            self.start = date.fromisoformat(self.start) if self.start else None
        if isinstance(self.end, str):
            self.end = date.fromisoformat(self.end) if self.end else None

    @property
    def is_active(self) -> bool:
        return self.start is not None or self.end is not None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None


@dataclass
class SearchCriteria:
    """Criteria for selecting notes within a user record."""

    text: str = ""
    case_sensitive: bool = False
    match_mode: MatchMode = MatchMode.SUBSTRING
    ignore_accents: bool = True
    locale: str = "en"
    date_range: DateRange = field(default_factory=DateRange)
    creators: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.match_mode = MatchMode(self.match_mode)

    @property
    def has_text_query(self) -> bool:
        return bool(self.text and self.text.strip())

    @property
    def has_date_filter(self) -> bool:
        return self.date_range.is_active

    @property
    def has_creator_filter(self) -> bool:
        return bool(self.creators)

    @property
    def is_active(self) -> bool:
        """False when the criteria would select nothing by omission."""
        return self.has_text_query or self.has_date_filter or self.has_creator_filter
