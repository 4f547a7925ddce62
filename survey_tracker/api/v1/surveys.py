"""Survey endpoints for API v1."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize_or_raise, raise_http
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.exceptions import SurveyTrackerError
from survey_tracker.domain import statuses
from survey_tracker.domain.filters import SurveyFilter
from survey_tracker.domain.staleness import days_since_update
from survey_tracker.models import Survey
from survey_tracker.schemas.common import APIEnvelope
from survey_tracker.schemas.surveys import (
    ContactResponse,
    HistoryItemResponse,
    SurveyCommentRequest,
    SurveyCreateRequest,
    SurveyResponse,
    SurveyStatusUpdateRequest,
    SurveyUpdateRequest,
)
from survey_tracker.services.survey_service import SurveyService

router = APIRouter(prefix="/surveys", tags=["surveys"])


def to_response(survey: Survey) -> SurveyResponse:
    return SurveyResponse(
        id=survey.id,
        client_id=survey.client_id,
        client_name=survey.client.name if survey.client is not None else None,
        owner_user_id=survey.owner_user_id,
        system_name=survey.system_name,
        system_description=survey.system_description,
        survey_date=survey.survey_date,
        received_date=survey.received_date,
        last_email_bounce_date=survey.last_email_bounce_date,
        status=survey.status,
        status_label=statuses.label(survey.status),
        is_archived=survey.is_archived,
        days_since_update=days_since_update(survey),
        created_at=survey.created_at,
        updated_at=survey.updated_at,
        contacts=[ContactResponse.model_validate(contact) for contact in survey.contacts],
    )


def build_filter(
    search: str | None,
    client: str | None,
    status_value: str | None,
    date_from: date | None,
    date_to: date | None,
    owner_user_id: int | None,
) -> SurveyFilter:
    return SurveyFilter(
        search_term=search,
        client=client,
        status=status_value,
        date_from=date_from,
        date_to=date_to,
        owner_user_id=owner_user_id,
    )


@router.get("", response_model=list[SurveyResponse])
def list_surveys(
    search: str | None = Query(default=None),
    client: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    owner_user_id: int | None = Query(default=None),
    archived: bool = Query(default=False),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[SurveyResponse]:
    user = authorize_or_raise(authorization, scopes=["surveys.read"])
    criteria = build_filter(search, client, status_filter, date_from, date_to, owner_user_id)
    surveys = SurveyService(db).list_surveys(user.as_requesting_user(), criteria, archived=archived)
    return [to_response(survey) for survey in surveys]


@router.post("", response_model=SurveyResponse, status_code=status.HTTP_201_CREATED)
def create_survey(
    payload: SurveyCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> SurveyResponse:
    user = authorize_or_raise(authorization, scopes=["surveys.write"])
    try:
        survey = SurveyService(db).create_survey(
            user.as_requesting_user(),
            client_id=payload.client_id,
            system_name=payload.system_name,
            survey_date=payload.survey_date,
            system_description=payload.system_description,
            received_date=payload.received_date,
            status=payload.status,
            contacts=payload.contacts,
        )
    except SurveyTrackerError as exc:
        raise_http(exc)
    return to_response(survey)


@router.get("/{survey_id}", response_model=SurveyResponse)
def get_survey(
    survey_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> SurveyResponse:
    user = authorize_or_raise(authorization, scopes=["surveys.read"])
    try:
        survey = SurveyService(db).get_survey(user.as_requesting_user(), survey_id)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return to_response(survey)


@router.patch("/{survey_id}", response_model=SurveyResponse)
def update_survey(
    survey_id: int,
    payload: SurveyUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> SurveyResponse:
    user = authorize_or_raise(authorization, scopes=["surveys.write"])
    changes = payload.model_dump(exclude_unset=True, exclude={"contacts"})
    try:
        survey = SurveyService(db).update_survey(
            user.as_requesting_user(),
            survey_id,
            changes,
            contacts=payload.contacts,
        )
    except SurveyTrackerError as exc:
        raise_http(exc)
    return to_response(survey)


@router.patch("/{survey_id}/status", response_model=SurveyResponse)
def update_status(
    survey_id: int,
    payload: SurveyStatusUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> SurveyResponse:
    user = authorize_or_raise(authorization, scopes=["surveys.write"])
    try:
        survey = SurveyService(db).update_status(user.as_requesting_user(), survey_id, payload.status)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return to_response(survey)


@router.post("/{survey_id}/email-bounce", response_model=SurveyResponse)
def mark_email_bounce(
    survey_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> SurveyResponse:
    user = authorize_or_raise(authorization, scopes=["surveys.write"])
    try:
        survey = SurveyService(db).mark_email_bounce(user.as_requesting_user(), survey_id)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return to_response(survey)


@router.post("/{survey_id}/archive", response_model=SurveyResponse)
def archive_survey(
    survey_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> SurveyResponse:
    user = authorize_or_raise(authorization, scopes=["surveys.write"])
    try:
        survey = SurveyService(db).archive(user.as_requesting_user(), survey_id)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return to_response(survey)


@router.post("/{survey_id}/restore", response_model=SurveyResponse)
def restore_survey(
    survey_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> SurveyResponse:
    user = authorize_or_raise(authorization, scopes=["surveys.write"])
    try:
        survey = SurveyService(db).restore(user.as_requesting_user(), survey_id)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return to_response(survey)


@router.delete("/{survey_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_survey(
    survey_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> None:
    user = authorize_or_raise(authorization, scopes=["surveys.write"])
    try:
        SurveyService(db).delete_permanently(user.as_requesting_user(), survey_id)
    except SurveyTrackerError as exc:
        raise_http(exc)


@router.post("/{survey_id}/comments", response_model=APIEnvelope, status_code=status.HTTP_201_CREATED)
def add_comment(
    survey_id: int,
    payload: SurveyCommentRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> APIEnvelope:
    user = authorize_or_raise(authorization, scopes=["surveys.write"])
    try:
        SurveyService(db).add_comment(user.as_requesting_user(), survey_id, payload.comment)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return APIEnvelope(message="Comment recorded.")


@router.get("/{survey_id}/history", response_model=list[HistoryItemResponse])
def survey_history(
    survey_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[HistoryItemResponse]:
    user = authorize_or_raise(authorization, scopes=["surveys.read"])
    try:
        items = SurveyService(db).merged_history(user.as_requesting_user(), survey_id)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return [HistoryItemResponse(**item) for item in items]
