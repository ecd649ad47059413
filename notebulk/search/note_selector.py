"""Selection of the notes in a user record that satisfy search criteria."""

import structlog

from notebulk.notes.models import Note, UserRecord
from notebulk.search.date_filter import DateRangeFilter
from notebulk.search.search_models import SearchCriteria
from notebulk.search.text_matcher import TextMatcher

logger = structlog.get_logger(__name__)


class NoteSelector:
    """Combines text, date and creator predicates over a user's notes."""

    def __init__(
        self,
        text_matcher: TextMatcher | None = None,
        date_filter: DateRangeFilter | None = None,
    ):
        self.text_matcher = text_matcher or TextMatcher()
        self.date_filter = date_filter or DateRangeFilter()

    def select(self, user: UserRecord, criteria: SearchCriteria) -> list[Note]:
        """Return the user's notes matching every active predicate.

        Criteria with no active predicate select nothing rather than
        everything.
        """
        if not user.notes or not criteria.is_active:
            return []

        matching = list(user.notes)

        # Text first: it is the cheaper predicate on large note collections
        if criteria.has_text_query:
            matching = [
                note
                for note in matching
                if self.text_matcher.matches(note.note_text, criteria.text, criteria)
            ]

        if criteria.has_date_filter:
            matching = [
                note
                for note in matching
                if self.date_filter.in_range(note.date_field, criteria.date_range)
            ]

        if criteria.has_creator_filter:
            creators = set(criteria.creators)
            matching = [note for note in matching if note.created_by in creators]

        logger.debug(
            "Notes selected",
            user_id=user.primary_id,
            total_notes=len(user.notes),
            matching_notes=len(matching),
        )
        return matching
