"""Local-day date range filtering for note timestamps."""

import re
from datetime import date, datetime, time

import structlog

from notebulk.search.search_models import DateRange

logger = structlog.get_logger(__name__)

_DATE_ONLY = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_END_OF_DAY = time(23, 59, 59, 999000)


def local_midnight(day: date) -> datetime:
    """Start of ``day`` in the local timezone (never UTC midnight)."""
    return datetime.combine(day, time.min).astimezone()


def local_end_of_day(day: date) -> datetime:
    """Last millisecond of ``day`` in the local timezone."""
    return datetime.combine(day, _END_OF_DAY).astimezone()


def parse_note_datetime(value: str | None) -> datetime | None:
    """Parse a note date field into an aware local datetime.

    Date-only values resolve to local midnight. Timestamps with an offset are
    converted to local time; timestamps without one are taken as local.
    Returns ``None`` for missing or unparsable input.
    """
    if not value:
        return None

    raw = str(value).strip()
    only_date = _DATE_ONLY.match(raw)
    try:
        if only_date:
            year, month, day = (int(part) for part in only_date.groups())
            return local_midnight(date(year, month, day))

        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        return datetime.fromisoformat(raw).astimezone()
    except ValueError:
        logger.debug("Unparsable note date", value=value)
        return None


class DateRangeFilter:
    """Inclusive whole-day range check on note dates."""

    def in_range(self, note_date_field: str | None, date_range: DateRange) -> bool:
        """True when the note date falls inside ``date_range``.

        A note whose date cannot be parsed is never in range.
        """
        note_moment = parse_note_datetime(note_date_field)
        if note_moment is None:
            return False

        if date_range.start is not None and note_moment < local_midnight(
            date_range.start
        ):
            return False

        if date_range.end is not None and note_moment > local_end_of_day(
            date_range.end
        ):
            return False

        return True
