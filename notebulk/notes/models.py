"""User record and note data models."""

from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

SegmentType = Literal["Internal", "External"]

# Passthrough fields some payloads use instead of created_date
_ALTERNATE_DATE_FIELDS = ("creation_date", "note_date")


class NoteType(BaseModel):
    """Note type code and its display description."""

    value: str = Field(..., description="Note type code, e.g. CIRCULATION")
    desc: str = Field(default="", description="Human readable label")


class NoteKey(NamedTuple):
    """Content-based identity of a note."""

    text: str
    created_date: str | None
    created_by: str | None


class Note(BaseModel):
    """A free-text note attached to a user record.

    Unknown upstream fields are kept so the record can be written back
    without losing data.
    """

    model_config = ConfigDict(extra="allow")

    note_text: str = Field(default="", description="The note's text")
    popup_note: bool = Field(default=False)
    user_viewable: bool = Field(default=False)
    note_type: NoteType | None = Field(default=None)
    created_by: str | None = Field(default=None)
    created_date: str | None = Field(
        default=None, description="Date-only (YYYY-MM-DD) or ISO-8601 timestamp"
    )
    segment_type: SegmentType | None = Field(default=None)

    @property
    def key(self) -> NoteKey:
        """Natural key shared by structurally equal copies of this note."""
        return NoteKey(self.note_text, self.created_date, self.created_by)

    @property
    def date_field(self) -> str | None:
        """Creation date, falling back to the alternate field names."""
        if self.created_date:
            return self.created_date
        extras = self.model_extra or {}
        for name in _ALTERNATE_DATE_FIELDS:
            value = extras.get(name)
            if value:
                return str(value)
        return None

    def snapshot(self) -> "Note":
        """Independent deep copy for audit logging."""
        return self.model_copy(deep=True)


class UserRecord(BaseModel):
    """A user record as fetched from the upstream store."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    primary_id: str = Field(..., description="Primary identifier of the user")
    notes: list[Note] = Field(default_factory=list, alias="user_note")
    load_error: str | None = Field(
        default=None,
        alias="error",
        description="Set when the record could not be loaded",
    )

    @field_validator("primary_id", mode="before")
    @classmethod
    def coerce_primary_id(cls, v: Any) -> str:
        """Set members carry numeric ids."""
        return str(v)

    @property
    def has_load_error(self) -> bool:
        return bool(self.load_error)

    def to_payload(self) -> dict[str, Any]:
        """Body written back upstream, using the wire field names."""
        return self.model_dump(
            by_alias=True, exclude_unset=True, exclude={"load_error"}
        )


def split_by_notes(
    users: list[UserRecord],
) -> tuple[list[UserRecord], list[UserRecord]]:
    """Split loaded users into those with notes and those without.

    Records that failed to load are left out of both lists.
    """
    with_notes: list[UserRecord] = []
    without_notes: list[UserRecord] = []
    for user in users:
        if user.has_load_error:
            continue
        if user.notes:
            with_notes.append(user)
        else:
            without_notes.append(user)
    return with_notes, without_notes
