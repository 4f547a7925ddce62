"""Shared authorization and error-mapping helpers for API v1 route modules."""

from __future__ import annotations

from typing import Any, NoReturn

from fastapi import HTTPException, status

from survey_tracker.auth.rbac import require_scopes
from survey_tracker.core.config import get_config
from survey_tracker.core.dependencies import CurrentUser, get_current_user
from survey_tracker.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendError,
    NotFoundError,
    SurveyTrackerError,
    ValidationError,
)


def _extract_bearer_token(authorization: str | None) -> str:
    if authorization is None or not authorization.strip():
        raise AuthenticationError("Authorization header is required.")
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Authorization header must use Bearer token.")
    return parts[1].strip()


def authorize(authorization: str | None, scopes: list[str]) -> CurrentUser:
    token = _extract_bearer_token(authorization)
    user = get_current_user(token=token, settings=get_config())
    require_scopes(user.role, scopes)
    return user


def map_auth_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED, str(exc)
    if isinstance(exc, AuthorizationError):
        return status.HTTP_403_FORBIDDEN, str(exc)
    return status.HTTP_401_UNAUTHORIZED, "Unauthorized."


def map_service_error(exc: SurveyTrackerError) -> tuple[int, Any]:
    """HTTP status and detail for each error kind raised by the services."""
    if isinstance(exc, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY, {"message": str(exc), "field": exc.field}
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND, str(exc)
    if isinstance(exc, (AuthenticationError, AuthorizationError)):
        return map_auth_error(exc)
    if isinstance(exc, BackendError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error."


def authorize_or_raise(authorization: str | None, scopes: list[str]) -> CurrentUser:
    try:
        return authorize(authorization=authorization, scopes=scopes)
    except SurveyTrackerError as exc:
        code, detail = map_auth_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc


def raise_http(exc: SurveyTrackerError) -> NoReturn:
    code, detail = map_service_error(exc)
    raise HTTPException(status_code=code, detail=detail) from exc
