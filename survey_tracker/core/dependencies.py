"""Dependency providers for API handlers and scripts."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from survey_tracker.auth.jwt import decode_jwt
from survey_tracker.core.config import Config, get_config
from survey_tracker.core.exceptions import AuthenticationError
from survey_tracker.database.db import get_db
from survey_tracker.domain.records import RequestingUser


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    role: str
    gender: str
    permissions_version: int
    claims: dict[str, Any]

    def as_requesting_user(self) -> RequestingUser:
        return RequestingUser(user_id=self.user_id, role=self.role)


def get_settings() -> Config:
    """Return validated application configuration."""
    return get_config()


def get_db_session() -> Generator[Session, None, None]:
    """Yield SQLAlchemy session for dependency injection."""
    yield from get_db()


def get_current_user(token: str, settings: Config | None = None) -> CurrentUser:
    """Resolve current user from an access token."""
    cfg = settings or get_settings()
    claims = decode_jwt(token=token, secret=cfg.JWT_SECRET)
    if claims.get("token_use", "access") != "access":
        raise AuthenticationError("Token is not an access token.")

    try:
        return CurrentUser(
            user_id=int(claims["sub"]),
            role=str(claims["role"]).lower(),
            gender=str(claims.get("gender", "male")).lower(),
            permissions_version=int(claims.get("permissions_version", 1)),
            claims=claims,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid auth claims.") from exc
