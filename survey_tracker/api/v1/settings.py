"""System settings endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize_or_raise, raise_http
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.exceptions import SurveyTrackerError
from survey_tracker.domain import statuses
from survey_tracker.domain.records import SystemSettings
from survey_tracker.schemas.settings import SystemSettingsResponse, SystemSettingsUpdateRequest
from survey_tracker.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


def _to_response(settings: SystemSettings) -> SystemSettingsResponse:
    return SystemSettingsResponse(
        stuck_threshold_days=settings.stuck_threshold_days,
        status_colors=dict(settings.status_colors),
        status_labels=dict(statuses.STATUS_LABELS),
        email_templates=dict(settings.email_templates),
    )


@router.get("", response_model=SystemSettingsResponse)
def get_settings(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> SystemSettingsResponse:
    authorize_or_raise(authorization, scopes=["settings.read"])
    return _to_response(SettingsService(db).load())


@router.put("", response_model=SystemSettingsResponse)
def update_settings(
    payload: SystemSettingsUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> SystemSettingsResponse:
    user = authorize_or_raise(authorization, scopes=["settings.write"])
    try:
        settings = SettingsService(db).update(
            user.as_requesting_user(),
            stuck_threshold_days=payload.stuck_threshold_days,
            status_colors=payload.status_colors,
            email_templates=payload.email_templates,
        )
    except SurveyTrackerError as exc:
        raise_http(exc)
    return _to_response(settings)
