"""Tests for local-day date range filtering."""

from datetime import date

import pytest

from notebulk.search.date_filter import DateRangeFilter, parse_note_datetime
from notebulk.search.search_models import DateRange

# POSIX TZ strings, so no tz database is needed
UTC = "UTC0"
NEW_YORK = "EST+5"
TOKYO = "JST-9"


@pytest.fixture
def date_filter() -> DateRangeFilter:
    return DateRangeFilter()


class TestParseNoteDatetime:
    def test_date_only_is_local_midnight(self, set_local_timezone):
        for zone in (UTC, NEW_YORK, TOKYO):
            set_local_timezone(zone)
            moment = parse_note_datetime("2024-03-10")

            assert moment is not None
            assert (moment.year, moment.month, moment.day) == (2024, 3, 10)
            assert (moment.hour, moment.minute) == (0, 0)

    def test_utc_timestamp_is_converted_to_local(self, set_local_timezone):
        set_local_timezone(TOKYO)
        moment = parse_note_datetime("2024-01-05T23:00:00Z")

        assert moment is not None
        assert (moment.day, moment.hour) == (6, 8)

    def test_offset_timestamp(self, set_local_timezone):
        set_local_timezone(UTC)
        moment = parse_note_datetime("2024-01-05T10:00:00+02:00")

        assert moment is not None
        assert moment.hour == 8

    @pytest.mark.parametrize("value", [None, "", "not-a-date", "2024-13-45"])
    def test_unparsable_values(self, value):
        assert parse_note_datetime(value) is None


class TestDateRangeFilter:
    def test_local_day_not_utc_instant(self, date_filter, set_local_timezone):
        day = DateRange(start=date(2024, 1, 5), end=date(2024, 1, 5))
        late_utc = "2024-01-05T23:00:00Z"

        set_local_timezone(UTC)
        assert date_filter.in_range(late_utc, day)

        set_local_timezone(NEW_YORK)
        assert date_filter.in_range(late_utc, day)

        set_local_timezone(TOKYO)
        assert not date_filter.in_range(late_utc, day)

    def test_date_only_note_matches_same_day_in_any_zone(
        self, date_filter, set_local_timezone
    ):
        day = DateRange(start="2024-01-05", end="2024-01-05")
        for zone in (UTC, NEW_YORK, TOKYO):
            set_local_timezone(zone)
            assert date_filter.in_range("2024-01-05", day)
            assert not date_filter.in_range("2024-01-04", day)
            assert not date_filter.in_range("2024-01-06", day)

    def test_end_bound_covers_whole_day(self, date_filter, set_local_timezone):
        set_local_timezone(NEW_YORK)
        day = DateRange(end=date(2024, 1, 5))

        assert date_filter.in_range("2024-01-05T23:59:59", day)
        assert not date_filter.in_range("2024-01-06T00:00:00", day)

    def test_start_only(self, date_filter):
        since = DateRange(start=date(2024, 1, 1))

        assert date_filter.in_range("2024-02-01", since)
        assert date_filter.in_range("2030-01-01", since)
        assert not date_filter.in_range("2023-12-31", since)

    def test_end_only(self, date_filter):
        until = DateRange(end=date(2024, 1, 1))

        assert date_filter.in_range("1999-06-01", until)
        assert not date_filter.in_range("2024-01-02", until)

    def test_open_range_places_no_constraint(self, date_filter):
        assert date_filter.in_range("2024-01-05", DateRange())

    def test_unparsable_date_fails_closed(self, date_filter):
        assert not date_filter.in_range("yesterday", DateRange())
        assert not date_filter.in_range(None, DateRange(start=date(2000, 1, 1)))


class TestDateRangeModel:
    def test_string_bounds_are_parsed(self):
        bounds = DateRange(start="2024-01-01", end="")

        assert bounds.start == date(2024, 1, 1)
        assert bounds.end is None
        assert bounds.is_active
        assert not bounds.is_complete
