"""Note modification and deletion with audit logging."""

from notebulk.mutation.models import (
    ModificationOptions,
    NoteAction,
    NoteLogEntry,
    UserProcessLog,
)
from notebulk.mutation.mutator import NoteMutator

__all__ = [
    "ModificationOptions",
    "NoteAction",
    "NoteLogEntry",
    "NoteMutator",
    "UserProcessLog",
]
