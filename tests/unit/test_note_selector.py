"""Tests for combining search predicates over a user's notes."""

from datetime import date

import pytest

from notebulk.search import DateRange, MatchMode, NoteSelector, SearchCriteria


@pytest.fixture
def selector() -> NoteSelector:
    return NoteSelector()


class TestNoteSelector:
    def test_inactive_criteria_select_nothing(self, selector, make_user):
        user = make_user(notes=["one", "two"])

        assert selector.select(user, SearchCriteria()) == []
        assert selector.select(user, SearchCriteria(text="   ")) == []

    def test_user_without_notes(self, selector, make_user):
        assert selector.select(make_user(notes=[]), SearchCriteria(text="x")) == []

    def test_text_only(self, selector, make_user):
        user = make_user(notes=["Lost card reported", "Fine paid", "Card renewed"])

        selected = selector.select(user, SearchCriteria(text="card"))

        assert [note.note_text for note in selected] == [
            "Lost card reported",
            "Card renewed",
        ]

    def test_date_only(self, selector, make_user, make_note):
        user = make_user(
            notes=[
                make_note("old", created_date="2023-06-01"),
                make_note("new", created_date="2024-02-01"),
            ]
        )
        criteria = SearchCriteria(date_range=DateRange(start=date(2024, 1, 1)))

        assert [note.note_text for note in selector.select(user, criteria)] == ["new"]

    def test_creators_only(self, selector, make_user, make_note):
        user = make_user(
            notes=[
                make_note("a", created_by="alice"),
                make_note("b", created_by="bob"),
                make_note("c", created_by=None),
            ]
        )
        criteria = SearchCriteria(creators=["bob", "carol"])

        assert [note.note_text for note in selector.select(user, criteria)] == ["b"]

    def test_predicates_are_conjunctive(self, selector, make_user, make_note):
        user = make_user(
            notes=[
                make_note("card lost", created_by="alice", created_date="2024-01-10"),
                make_note("card lost", created_by="bob", created_date="2024-01-10"),
                make_note("card lost", created_by="alice", created_date="2022-01-10"),
                make_note("fine paid", created_by="alice", created_date="2024-01-10"),
            ]
        )
        criteria = SearchCriteria(
            text="card",
            match_mode=MatchMode.WHOLE_WORD,
            date_range=DateRange(start="2024-01-01", end="2024-12-31"),
            creators=["alice"],
        )

        selected = selector.select(user, criteria)

        assert len(selected) == 1
        assert selected[0].created_by == "alice"
        assert selected[0].created_date == "2024-01-10"

    def test_alternate_date_field(self, selector, make_user, make_note):
        note = make_note("legacy", created_date=None, creation_date="2024-03-03")
        user = make_user(notes=[note])
        criteria = SearchCriteria(
            date_range=DateRange(start="2024-03-03", end="2024-03-03")
        )

        assert selector.select(user, criteria) == [note]

    def test_note_without_date_excluded_by_date_filter(
        self, selector, make_user, make_note
    ):
        user = make_user(notes=[make_note("undated", created_date=None)])
        criteria = SearchCriteria(
            text="undated", date_range=DateRange(start="2000-01-01")
        )

        assert selector.select(user, criteria) == []

    def test_returns_live_note_objects(self, selector, make_user):
        user = make_user(notes=["target"])

        selected = selector.select(user, SearchCriteria(text="target"))

        assert selected[0] is user.notes[0]
