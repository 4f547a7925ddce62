"""Personal note endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize_or_raise, raise_http
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.exceptions import SurveyTrackerError
from survey_tracker.schemas.notes import NoteRequest, NoteResponse
from survey_tracker.services.note_service import NoteService

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=list[NoteResponse])
def list_notes(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[NoteResponse]:
    user = authorize_or_raise(authorization, scopes=["notes.own"])
    return [NoteResponse.model_validate(note) for note in NoteService(db).list_notes(user.as_requesting_user())]


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def create_note(
    payload: NoteRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> NoteResponse:
    user = authorize_or_raise(authorization, scopes=["notes.own"])
    try:
        note = NoteService(db).create_note(user.as_requesting_user(), payload.title, payload.content)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return NoteResponse.model_validate(note)


@router.put("/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: int,
    payload: NoteRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> NoteResponse:
    user = authorize_or_raise(authorization, scopes=["notes.own"])
    try:
        note = NoteService(db).update_note(user.as_requesting_user(), note_id, payload.title, payload.content)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return NoteResponse.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    note_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    user = authorize_or_raise(authorization, scopes=["notes.own"])
    try:
        NoteService(db).delete_note(user.as_requesting_user(), note_id)
    except SurveyTrackerError as exc:
        raise_http(exc)
