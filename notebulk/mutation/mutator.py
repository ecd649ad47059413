"""Applies modify or delete actions to the selected notes of a user."""

import structlog

from notebulk.mutation.models import (
    ModificationOptions,
    NoteAction,
    NoteLogEntry,
    UserProcessLog,
)
from notebulk.notes.models import Note, NoteKey, UserRecord

logger = structlog.get_logger(__name__)


class NoteMutator:
    """Mutates a user's live notes and records an audit log.

    Notes are matched by their content key, not by object identity: the
    selection pass may have looked at a structurally equal copy of the
    record. Bit-identical duplicate notes share a key and are therefore
    changed or deleted together.
    """

    def apply(
        self,
        user: UserRecord,
        matching_notes: list[Note],
        options: ModificationOptions,
    ) -> UserProcessLog:
        """Apply ``options`` to ``matching_notes`` within ``user``."""
        log = UserProcessLog(
            user_id=user.primary_id, no_matching_notes=not matching_notes
        )
        if not matching_notes:
            return log

        selected = {note.key for note in matching_notes}

        if options.action == NoteAction.DELETE:
            if options.delete_matching_notes:
                self._delete(user, selected, log)
        else:
            self._modify(user, selected, options, log)

        logger.debug(
            "Notes processed",
            user_id=user.primary_id,
            action=options.action.value,
            logged_notes=len(log.notes),
        )
        return log

    def _delete(
        self, user: UserRecord, selected: set[NoteKey], log: UserProcessLog
    ) -> None:
        kept: list[Note] = []
        for note in user.notes:
            if note.key in selected:
                log.notes.append(NoteLogEntry(before=note.snapshot(), deleted=True))
            else:
                kept.append(note)
        user.notes = kept

    def _modify(
        self,
        user: UserRecord,
        selected: set[NoteKey],
        options: ModificationOptions,
        log: UserProcessLog,
    ) -> None:
        for note in user.notes:
            if note.key not in selected:
                continue

            before = note.snapshot()
            if self._apply_changes(user.primary_id, note, options):
                log.notes.append(
                    NoteLogEntry(before=before, after=note.snapshot(), deleted=False)
                )

    def _apply_changes(
        self, user_id: str, note: Note, options: ModificationOptions
    ) -> bool:
        changed = False

        if options.set_popup and not note.popup_note:
            note.popup_note = True
            changed = True

        if options.clear_popup and note.popup_note:
            note.popup_note = False
            changed = True

        if options.note_type is not None:
            if note.note_type is None:
                # Writing a type onto a note without one produces a payload
                # the upstream store rejects
                logger.warning(
                    "Note has no type object, skipping type change",
                    user_id=user_id,
                    created_date=note.created_date,
                    created_by=note.created_by,
                )
            elif note.note_type.value != options.note_type.value:
                note.note_type.value = options.note_type.value
                note.note_type.desc = options.note_type.desc
                changed = True

        if (
            options.set_user_viewable is not None
            and note.user_viewable != options.set_user_viewable
        ):
            note.user_viewable = options.set_user_viewable
            changed = True

        return changed
