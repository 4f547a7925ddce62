"""Signed bearer tokens (HS256) for the survey tracker API."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from survey_tracker.core.exceptions import AuthenticationError

_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _unb64(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _segment(obj: dict[str, Any]) -> str:
    return _b64(json.dumps(obj, separators=(",", ":"), sort_keys=True).encode("utf-8"))


def _signature(signing_input: str, secret: str) -> str:
    return _b64(hmac.new(secret.encode("utf-8"), signing_input.encode("utf-8"), hashlib.sha256).digest())


def encode_jwt(payload: dict[str, Any], secret: str, ttl: timedelta) -> str:
    """Sign ``payload`` with ``iat``/``exp``/``jti`` filled in when absent."""
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    now = datetime.now(timezone.utc)
    body = {"iat": int(now.timestamp()), "exp": int((now + ttl).timestamp()), "jti": uuid.uuid4().hex, **payload}
    signing_input = f"{_segment(_HEADER)}.{_segment(body)}"
    return f"{signing_input}.{_signature(signing_input, secret)}"


def decode_jwt(token: str, secret: str, verify_exp: bool = True) -> dict[str, Any]:
    """Verify signature (and expiry) and return the claims."""
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    parts = token.split(".")
    if len(parts) != 3:
        raise AuthenticationError("Invalid token format.")
    signing_input, signature = f"{parts[0]}.{parts[1]}", parts[2]
    if not hmac.compare_digest(_signature(signing_input, secret), signature):
        raise AuthenticationError("Invalid token signature.")

    try:
        claims = json.loads(_unb64(parts[1]))
    except ValueError as exc:
        raise AuthenticationError("Invalid token payload.") from exc
    if not isinstance(claims, dict):
        raise AuthenticationError("Invalid token payload.")

    if verify_exp:
        if "exp" not in claims:
            raise AuthenticationError("Token is missing exp claim.")
        if int(claims["exp"]) < int(datetime.now(timezone.utc).timestamp()):
            raise AuthenticationError("Token has expired.")
    return claims


def create_access_token(
    user_id: int,
    role: str,
    secret: str,
    gender: str = "male",
    permissions_version: int = 1,
    ttl_minutes: int = 60,
) -> str:
    """Short-lived token carrying the role and gender the API authorizes with."""
    claims = {
        "sub": str(user_id),
        "role": role,
        "gender": gender,
        "permissions_version": permissions_version,
        "token_use": "access",
    }
    return encode_jwt(claims, secret=secret, ttl=timedelta(minutes=ttl_minutes))


def create_token_pair(
    user_id: int,
    role: str,
    secret: str,
    gender: str = "male",
    permissions_version: int = 1,
    access_ttl_minutes: int = 60,
    refresh_ttl_days: int = 14,
) -> TokenPair:
    # The refresh token only names the user; role and gender are re-read on refresh.
    refresh = encode_jwt(
        {"sub": str(user_id), "token_use": "refresh"},
        secret=secret,
        ttl=timedelta(days=refresh_ttl_days),
    )
    access = create_access_token(
        user_id,
        role,
        secret,
        gender=gender,
        permissions_version=permissions_version,
        ttl_minutes=access_ttl_minutes,
    )
    return TokenPair(access_token=access, refresh_token=refresh)
