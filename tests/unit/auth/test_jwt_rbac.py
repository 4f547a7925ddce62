from __future__ import annotations

import pytest

from survey_tracker.auth.jwt import create_token_pair, decode_jwt
from survey_tracker.auth.rbac import has_scopes, require_scopes
from survey_tracker.core.dependencies import get_current_user
from survey_tracker.core.exceptions import AuthenticationError, AuthorizationError
from survey_tracker.schemas.auth import TokenClaims


def test_jwt_roundtrip_contains_required_claims():
    tokens = create_token_pair(user_id=10, role="manager", gender="female", secret="test-secret")
    claims = decode_jwt(tokens.access_token, secret="test-secret")
    assert claims["sub"] == "10"
    assert claims["role"] == "manager"
    assert claims["gender"] == "female"
    assert claims["token_use"] == "access"
    assert "exp" in claims
    assert "iat" in claims
    assert "jti" in claims
    assert TokenClaims.model_validate(claims).permissions_version == 1


def test_jwt_rejects_wrong_secret():
    tokens = create_token_pair(user_id=1, role="admin", secret="test-secret")
    with pytest.raises(AuthenticationError):
        decode_jwt(tokens.access_token, secret="other-secret")


def test_refresh_token_is_not_accepted_as_access():
    tokens = create_token_pair(user_id=3, role="surveyor", secret="change_me_jwt_secret")

    class _Cfg:
        JWT_SECRET = "change_me_jwt_secret"

    assert get_current_user(tokens.access_token, settings=_Cfg()).user_id == 3
    with pytest.raises(AuthenticationError):
        get_current_user(tokens.refresh_token, settings=_Cfg())


def test_rbac_blocks_missing_scope():
    require_scopes("surveyor", ["surveys.read"])
    with pytest.raises(AuthorizationError):
        require_scopes("surveyor", ["audit.read"])


def test_rbac_role_matrix():
    assert has_scopes("manager", ["audit.read", "surveys.read_all"])
    assert not has_scopes("manager", ["settings.write"])
    assert not has_scopes("manager", ["users.write"])
    assert has_scopes("admin", ["settings.write", "users.write"])
    assert not has_scopes("unknown", ["surveys.read"])


def test_refresh_token_only_names_the_user():
    tokens = create_token_pair(user_id=7, role="admin", gender="female", secret="test-secret", refresh_ttl_days=1)
    claims = decode_jwt(tokens.refresh_token, secret="test-secret")
    assert claims["sub"] == "7"
    assert claims["token_use"] == "refresh"
    assert "role" not in claims


def test_jwt_rejects_malformed_token():
    with pytest.raises(AuthenticationError):
        decode_jwt("not-a-token", secret="test-secret")
