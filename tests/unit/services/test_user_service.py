from __future__ import annotations

import pytest

from survey_tracker.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from survey_tracker.core.security import TEMP_PASSWORD_CHARSET, verify_password
from survey_tracker.domain.records import RequestingUser
from survey_tracker.models import AuditLog
from survey_tracker.services.user_service import UserService


def test_authenticate_checks_password(db_session, make_user):
    user = make_user(email="noa@example.com", password="correct-horse")
    service = UserService(db_session)
    assert service.authenticate("NOA@example.com", "correct-horse").id == user.id
    with pytest.raises(AuthenticationError):
        service.authenticate("noa@example.com", "wrong")
    with pytest.raises(AuthenticationError):
        service.authenticate("nobody@example.com", "correct-horse")


def test_reset_password_generates_temporary_password(db_session, make_user):
    admin = make_user(role="admin")
    target = make_user()
    service = UserService(db_session)

    temp_password = service.reset_password(RequestingUser(admin.id, "admin"), target.id, target.email)

    assert len(temp_password) == 12
    assert set(temp_password) <= set(TEMP_PASSWORD_CHARSET)
    db_session.refresh(target)
    assert verify_password(temp_password, target.hashed_password)
    assert target.password_reset_required is True
    assert db_session.query(AuditLog).filter(AuditLog.action == "RESET_PASSWORD").count() == 1


def test_reset_password_is_admin_only(db_session, make_user):
    manager = make_user(role="manager")
    target = make_user()
    with pytest.raises(AuthorizationError):
        UserService(db_session).reset_password(RequestingUser(manager.id, "manager"), target.id, target.email)


def test_reset_password_for_missing_user(db_session, make_user):
    admin = make_user(role="admin")
    with pytest.raises(NotFoundError):
        UserService(db_session).reset_password(RequestingUser(admin.id, "admin"), 999, "ghost@example.com")


def test_create_user_without_password_returns_temporary_one(db_session, make_user):
    admin = make_user(role="admin")
    user, temp_password = UserService(db_session).create_user(
        RequestingUser(admin.id, "admin"),
        email="New.User@Example.com",
        first_name="Yael",
        last_name="Mizrahi",
        role="manager",
        gender="female",
    )
    assert user.email == "new.user@example.com"
    assert user.password_reset_required is True
    assert verify_password(temp_password, user.hashed_password)


def test_create_user_rejects_duplicates_and_bad_roles(db_session, make_user):
    admin = make_user(role="admin", email="admin@example.com")
    viewer = RequestingUser(admin.id, "admin")
    service = UserService(db_session)
    with pytest.raises(ValidationError) as excinfo:
        service.create_user(viewer, email="admin@example.com", first_name="A", last_name="B", password="password123")
    assert excinfo.value.field == "email"
    with pytest.raises(ValidationError) as excinfo:
        service.create_user(viewer, email="x@example.com", first_name="A", last_name="B", role="owner")
    assert excinfo.value.field == "role"


def test_user_list_is_hidden_from_surveyors(db_session, make_user):
    surveyor = make_user()
    with pytest.raises(AuthorizationError):
        UserService(db_session).list_users(RequestingUser(surveyor.id, "surveyor"))
