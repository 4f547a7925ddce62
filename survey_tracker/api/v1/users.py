"""User administration endpoints for API v1."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize, authorize_or_raise, raise_http
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.exceptions import AuthenticationError, AuthorizationError, SurveyTrackerError
from survey_tracker.schemas.users import (
    PasswordResetRequest,
    PasswordResetResponse,
    UserCreateRequest,
    UserCreateResponse,
    UserResponse,
    UserUpdateRequest,
)
from survey_tracker.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
def list_users(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[UserResponse]:
    user = authorize_or_raise(authorization, scopes=["users.read"])
    try:
        users = UserService(db).list_users(user.as_requesting_user())
    except SurveyTrackerError as exc:
        raise_http(exc)
    return [UserResponse.model_validate(item) for item in users]


@router.post("", response_model=UserCreateResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> UserCreateResponse:
    user = authorize_or_raise(authorization, scopes=["users.write"])
    try:
        created, temp_password = UserService(db).create_user(
            user.as_requesting_user(),
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
            gender=payload.gender,
            password=payload.password,
        )
    except SurveyTrackerError as exc:
        raise_http(exc)
    return UserCreateResponse(user=UserResponse.model_validate(created), temp_password=temp_password)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> UserResponse:
    user = authorize_or_raise(authorization, scopes=["users.write"])
    try:
        updated = UserService(db).update_user(user.as_requesting_user(), user_id, **payload.model_dump())
    except SurveyTrackerError as exc:
        raise_http(exc)
    return UserResponse.model_validate(updated)


@router.post("/reset-password")
def reset_password(
    payload: PasswordResetRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> JSONResponse:
    """Admin-only. 403 for any authentication or authorization failure, 500 for anything else."""
    try:
        user = authorize(authorization=authorization, scopes=["users.reset_password"])
        temp_password = UserService(db).reset_password(user.as_requesting_user(), payload.user_id, payload.email)
    except (AuthenticationError, AuthorizationError) as exc:
        body = PasswordResetResponse(success=False, error=str(exc))
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=body.model_dump(exclude_none=True))
    except SurveyTrackerError as exc:
        logger.error(
            "auth.password_reset_failed",
            extra={"event": "auth.password_reset_failed", "target_user_id": payload.user_id, "detail": str(exc)},
        )
        body = PasswordResetResponse(success=False, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump(exclude_none=True)
        )

    body = PasswordResetResponse(success=True, temp_password=temp_password)
    return JSONResponse(content=body.model_dump(by_alias=True, exclude_none=True))
