"""Note type catalog offered to the modification options."""

from notebulk.notes.models import NoteType

NOTE_TYPES: tuple[NoteType, ...] = (
    NoteType(value="LIBRARY", desc="Library"),
    NoteType(value="ADDRESS", desc="Address"),
    NoteType(value="ERP", desc="ERP"),
    NoteType(value="POPUP", desc="General"),
    NoteType(value="CIRCULATION", desc="Circulation"),
    NoteType(value="BARCODE", desc="Barcode"),
    NoteType(value="REGISTAR", desc="Registrar"),
    NoteType(value="OTHER", desc="Other"),
)


def find_note_type(
    value: str, catalog: tuple[NoteType, ...] = NOTE_TYPES
) -> NoteType | None:
    """Look up a catalog entry by its code, ignoring case."""
    wanted = value.strip().upper()
    for note_type in catalog:
        if note_type.value.upper() == wanted:
            return note_type.model_copy()
    return None
