"""Dashboard statistics endpoints for API v1."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize_or_raise
from survey_tracker.api.v1.surveys import build_filter
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.schemas.statistics import ReminderResponse, UserSummaryResponse
from survey_tracker.services.statistics_service import StatisticsService

router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("")
def overview(
    search: str | None = Query(default=None),
    client: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    owner_user_id: int | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    user = authorize_or_raise(authorization, scopes=["statistics.read"])
    criteria = build_filter(search, client, status_filter, date_from, date_to, owner_user_id)
    return StatisticsService(db).overview(user.as_requesting_user(), criteria)


@router.get("/reminders", response_model=list[ReminderResponse])
def reminders(
    search: str | None = Query(default=None),
    client: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    owner_user_id: int | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ReminderResponse]:
    user = authorize_or_raise(authorization, scopes=["statistics.read"])
    criteria = build_filter(search, client, status_filter, date_from, date_to, owner_user_id)
    items = StatisticsService(db).reminders(user.as_requesting_user(), criteria)
    return [ReminderResponse(**item) for item in items]


@router.get("/users", response_model=list[UserSummaryResponse])
def user_summary(
    search: str | None = Query(default=None),
    client: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    owner_user_id: int | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[UserSummaryResponse]:
    user = authorize_or_raise(authorization, scopes=["statistics.read"])
    criteria = build_filter(search, client, status_filter, date_from, date_to, owner_user_id)
    items = StatisticsService(db).user_summary(user.as_requesting_user(), criteria)
    return [UserSummaryResponse(**item) for item in items]


@router.get("/completions")
def completions_by_transition(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[dict]:
    user = authorize_or_raise(authorization, scopes=["statistics.read"])
    return StatisticsService(db).completions_by_transition(user.as_requesting_user())
