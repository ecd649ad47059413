"""Modification options and per-user process log models."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from notebulk.notes.models import Note, NoteType


class NoteAction(str, Enum):
    """Action applied to the matching notes."""

    MODIFY = "modify"
    DELETE = "delete"


class ModificationOptions(BaseModel):
    """What to do with the notes a search selected."""

    action: NoteAction
    set_popup: bool = Field(default=False, description="Force the popup flag on")
    clear_popup: bool = Field(default=False, description="Force the popup flag off")
    note_type: NoteType | None = Field(default=None, description="Replacement type")
    set_user_viewable: bool | None = Field(
        default=None, description="Target value of the user viewable flag"
    )
    delete_matching_notes: bool = Field(default=False)

    @model_validator(mode="after")
    def validate_coherence(self) -> "ModificationOptions":
        """Reject contradictory combinations."""
        if self.set_popup and self.clear_popup:
            raise ValueError("set_popup and clear_popup are mutually exclusive")
        if self.action == NoteAction.DELETE and self.has_field_changes:
            raise ValueError("The delete action accepts no modification options")
        if self.action == NoteAction.MODIFY and self.delete_matching_notes:
            raise ValueError("delete_matching_notes requires the delete action")
        return self

    @property
    def has_field_changes(self) -> bool:
        return (
            self.set_popup
            or self.clear_popup
            or self.note_type is not None
            or self.set_user_viewable is not None
        )

    @classmethod
    def for_delete(cls) -> "ModificationOptions":
        return cls(action=NoteAction.DELETE, delete_matching_notes=True)


class NoteLogEntry(BaseModel):
    """Before/after record of one changed or deleted note."""

    before: Note
    after: Note | None = None
    deleted: bool = False


class UserProcessLog(BaseModel):
    """Outcome of processing one user record."""

    user_id: str
    no_matching_notes: bool = False
    notes: list[NoteLogEntry] = Field(default_factory=list)
    update_successful: bool | None = None
    update_error: str | None = None

    @property
    def modified(self) -> bool:
        """True when at least one note was changed or deleted."""
        return bool(self.notes)
