"""Note search: text matching, date ranges and selection."""

from notebulk.search.date_filter import DateRangeFilter, parse_note_datetime
from notebulk.search.note_selector import NoteSelector
from notebulk.search.search_models import DateRange, MatchMode, SearchCriteria
from notebulk.search.text_matcher import TextMatcher, fold_case

__all__ = [
    "DateRange",
    "DateRangeFilter",
    "MatchMode",
    "NoteSelector",
    "SearchCriteria",
    "TextMatcher",
    "fold_case",
    "parse_note_datetime",
]
