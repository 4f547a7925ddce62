"""Auth endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from survey_tracker.api.v1._authz import authorize_or_raise, raise_http
from survey_tracker.auth.jwt import create_token_pair, decode_jwt
from survey_tracker.core.config import get_config
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.exceptions import AuthenticationError, NotFoundError, SurveyTrackerError
from survey_tracker.schemas.auth import (
    ChangePasswordRequest,
    CurrentUserResponse,
    LoginRequest,
    RefreshRequest,
    TokenResponse,
)
from survey_tracker.schemas.common import APIEnvelope
from survey_tracker.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_tokens(user_id: int, role: str, gender: str, password_reset_required: bool = False) -> TokenResponse:
    cfg = get_config()
    tokens = create_token_pair(
        user_id=user_id,
        role=role,
        gender=gender,
        secret=cfg.JWT_SECRET,
        permissions_version=cfg.JWT_PERMISSIONS_VERSION,
        access_ttl_minutes=cfg.JWT_ACCESS_TTL_MINUTES,
        refresh_ttl_days=cfg.JWT_REFRESH_TTL_DAYS,
    )
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        password_reset_required=password_reset_required,
    )


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db_session)) -> TokenResponse:
    try:
        user = UserService(db).authenticate(payload.email, payload.password)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    return _issue_tokens(user.id, user.role.value, user.gender.value, user.password_reset_required)


@router.post("/refresh", response_model=TokenResponse)
def refresh(payload: RefreshRequest, db: Session = Depends(get_db_session)) -> TokenResponse:
    cfg = get_config()
    try:
        claims = decode_jwt(payload.refresh_token, secret=cfg.JWT_SECRET)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    if claims.get("token_use") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token is not a refresh token.")

    # Role and gender are re-read so that profile edits take effect on refresh.
    try:
        user = UserService(db).get_user(int(claims["sub"]))
    except (KeyError, ValueError, NotFoundError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user.") from exc
    return _issue_tokens(user.id, user.role.value, user.gender.value, user.password_reset_required)


@router.get("/me", response_model=CurrentUserResponse)
def me(authorization: str | None = Header(default=None, alias="Authorization")) -> CurrentUserResponse:
    user = authorize_or_raise(authorization, scopes=[])
    return CurrentUserResponse(id=user.user_id, role=user.role, gender=user.gender)


@router.post("/change-password", response_model=APIEnvelope)
def change_password(
    payload: ChangePasswordRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> APIEnvelope:
    """Replace the caller's password; clears the pending reset flag."""
    user = authorize_or_raise(authorization, scopes=[])
    try:
        UserService(db).change_password(user.user_id, payload.current_password, payload.new_password)
    except SurveyTrackerError as exc:
        raise_http(exc)
    return APIEnvelope(message="Password changed.")
