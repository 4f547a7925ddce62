from __future__ import annotations

import pytest

from survey_tracker.core.exceptions import AuthorizationError, ValidationError
from survey_tracker.domain.records import RequestingUser
from survey_tracker.models import AuditLog
from survey_tracker.services.settings_service import SettingsService


def test_defaults_apply_when_nothing_is_stored(db_session):
    settings = SettingsService(db_session).load()
    assert settings.stuck_threshold_days == 5
    assert settings.status_colors["received"] == "#4FC3F7"


def test_admin_update_is_persisted_and_audited(db_session, make_user):
    admin = make_user(role="admin")
    service = SettingsService(db_session)

    updated = service.update(
        RequestingUser(admin.id, "admin"),
        stuck_threshold_days=8,
        status_colors={"completed": "#000000"},
    )

    assert updated.stuck_threshold_days == 8
    assert updated.status_colors["completed"] == "#000000"
    assert updated.status_colors["received"] == "#4FC3F7"
    assert SettingsService(db_session).load().stuck_threshold_days == 8
    entry = db_session.query(AuditLog).filter(AuditLog.action == "UPDATE_SYSTEM_SETTINGS").one()
    assert entry.user_id == admin.id
    assert entry.new_values["stuck_survey_threshold_days"] == 8


def test_non_admin_cannot_update_settings(db_session, make_user):
    manager = make_user(role="manager")
    with pytest.raises(AuthorizationError):
        SettingsService(db_session).update(RequestingUser(manager.id, "manager"), stuck_threshold_days=3)


@pytest.mark.parametrize("value", [0, -2, True])
def test_threshold_must_be_positive_integer(db_session, make_user, value):
    admin = make_user(role="admin")
    with pytest.raises(ValidationError) as excinfo:
        SettingsService(db_session).update(RequestingUser(admin.id, "admin"), stuck_threshold_days=value)
    assert excinfo.value.field == "stuck_threshold_days"


def test_colors_must_be_hex_for_known_statuses(db_session, make_user):
    admin = make_user(role="admin")
    viewer = RequestingUser(admin.id, "admin")
    service = SettingsService(db_session)
    with pytest.raises(ValidationError):
        service.update(viewer, status_colors={"completed": "green"})
    with pytest.raises(ValidationError):
        service.update(viewer, status_colors={"paused": "#000000"})
