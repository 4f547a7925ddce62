"""Private per-user notes."""

from __future__ import annotations

from survey_tracker.core.exceptions import NotFoundError
from survey_tracker.domain.records import RequestingUser
from survey_tracker.models import PersonalNote
from survey_tracker.services.base_service import BaseService
from survey_tracker.utils.validators import require_text


class NoteService(BaseService):
    def list_notes(self, viewer: RequestingUser) -> list[PersonalNote]:
        return (
            self.db.query(PersonalNote)
            .filter(PersonalNote.user_id == viewer.user_id)
            .order_by(PersonalNote.updated_at.desc(), PersonalNote.id.desc())
            .all()
        )

    def get_note(self, viewer: RequestingUser, note_id: int) -> PersonalNote:
        note = (
            self.db.query(PersonalNote)
            .filter(PersonalNote.id == note_id, PersonalNote.user_id == viewer.user_id)
            .first()
        )
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}")
        return note

    def create_note(self, viewer: RequestingUser, title: str, content: str) -> PersonalNote:
        note = PersonalNote(
            user_id=viewer.user_id,
            title=require_text(title, field="title", max_len=255),
            content=require_text(content, field="content"),
        )
        self.db.add(note)
        self.commit()
        return note

    def update_note(self, viewer: RequestingUser, note_id: int, title: str, content: str) -> PersonalNote:
        note = self.get_note(viewer, note_id)
        note.title = require_text(title, field="title", max_len=255)
        note.content = require_text(content, field="content")
        self.commit()
        return note

    def delete_note(self, viewer: RequestingUser, note_id: int) -> None:
        self.db.delete(self.get_note(viewer, note_id))
        self.commit()
