"""User records, notes and the note type catalog."""

from notebulk.notes.catalog import NOTE_TYPES, find_note_type
from notebulk.notes.models import (
    Note,
    NoteKey,
    NoteType,
    SegmentType,
    UserRecord,
    split_by_notes,
)

__all__ = [
    "Note",
    "NoteKey",
    "NoteType",
    "SegmentType",
    "UserRecord",
    "split_by_notes",
    "NOTE_TYPES",
    "find_note_type",
]
