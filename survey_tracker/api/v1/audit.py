"""Audit log endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize_or_raise, raise_http
from survey_tracker.core.config import get_config
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.exceptions import SurveyTrackerError
from survey_tracker.schemas.audit import AuditLogResponse
from survey_tracker.services.audit_service import AuditService

router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("", response_model=list[AuditLogResponse])
def list_audit_logs(
    limit: int | None = Query(default=None, ge=1, le=1000),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[AuditLogResponse]:
    user = authorize_or_raise(authorization, scopes=["audit.read"])
    try:
        rows = AuditService(db).list_recent(user.as_requesting_user(), limit=limit or get_config().AUDIT_LOG_LIMIT)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return [AuditLogResponse(**row) for row in rows]
