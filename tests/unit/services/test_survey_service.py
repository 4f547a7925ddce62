from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from survey_tracker.core.exceptions import BackendError, NotFoundError, ValidationError
from survey_tracker.domain.filters import SurveyFilter
from survey_tracker.domain.records import RequestingUser
from survey_tracker.domain.staleness import as_utc
from survey_tracker.models import AuditLog, Contact, Survey, SurveyHistory
from survey_tracker.services.survey_service import SurveyService


def _viewer(user) -> RequestingUser:
    return RequestingUser(user_id=user.id, role=user.role.value)


def _create(service, viewer, client, name="Billing", **kwargs):
    return service.create_survey(
        viewer,
        client_id=client.id,
        system_name=name,
        survey_date=date(2024, 1, 10),
        **kwargs,
    )


def _history(db_session, survey_id):
    return db_session.query(SurveyHistory).filter(SurveyHistory.survey_id == survey_id).order_by(SurveyHistory.id).all()


def test_create_defaults_status_and_drops_blank_contacts(db_session, make_user, make_client):
    owner = make_user()
    client = make_client()
    survey = _create(
        SurveyService(db_session),
        _viewer(owner),
        client,
        contacts=[
            {"first_name": "Dana", "email": "dana@example.com"},
            {"first_name": " ", "last_name": "", "email": "", "phone": ""},
        ],
    )
    assert survey.status == "received"
    assert survey.owner_user_id == owner.id
    assert survey.is_archived is False
    assert [c.first_name for c in survey.contacts] == ["Dana"]
    assert db_session.query(AuditLog).filter(AuditLog.action == "INSERT", AuditLog.table_name == "surveys").count() == 1


def test_create_with_unknown_status_is_rejected(db_session, make_user, make_client):
    with pytest.raises(ValidationError) as excinfo:
        _create(SurveyService(db_session), _viewer(make_user()), make_client(), status="done")
    assert excinfo.value.field == "status"


def test_status_change_appends_exactly_one_history_entry(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())

    service.update_status(_viewer(owner), survey.id, "in_writing")

    [entry] = _history(db_session, survey.id)
    assert (entry.field_name, entry.old_value, entry.new_value) == ("status", "received", "in_writing")
    assert entry.user_id == owner.id
    assert db_session.get(Survey, survey.id).status == "in_writing"


def test_setting_same_status_records_nothing(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())
    service.update_status(_viewer(owner), survey.id, "received")
    assert _history(db_session, survey.id) == []


def test_edit_records_one_entry_per_changed_field_and_replaces_contacts(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client(), contacts=[{"first_name": "Old"}])

    service.update_survey(
        _viewer(owner),
        survey.id,
        {"system_name": "Billing v2", "system_description": "Ledger", "survey_date": date(2024, 1, 10)},
        contacts=[{"first_name": "New"}, {"last_name": "Second"}],
    )

    entries = _history(db_session, survey.id)
    assert sorted(e.field_name for e in entries) == ["system_description", "system_name"]
    by_field = {e.field_name: e for e in entries}
    assert by_field["system_name"].old_value == "Billing"
    assert by_field["system_name"].new_value == "Billing v2"
    assert by_field["system_description"].old_value is None
    assert sorted(c.first_name for c in db_session.query(Contact).all()) == ["", "New"]


def test_edit_rejects_untracked_fields(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())
    with pytest.raises(ValidationError):
        service.update_survey(_viewer(owner), survey.id, {"owner_user_id": 99})


def test_mutation_moves_updated_at_forward(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())
    stale = datetime.now(timezone.utc) - timedelta(days=9)
    survey.updated_at = stale
    db_session.commit()

    service.update_status(_viewer(owner), survey.id, "chen_review")

    assert as_utc(db_session.get(Survey, survey.id).updated_at) > stale + timedelta(days=8)


def test_surveyor_cannot_reach_other_users_surveys(db_session, make_user, make_client):
    alice = make_user()
    bob = make_user()
    manager = make_user(role="manager")
    client = make_client()
    service = SurveyService(db_session)
    for i in range(3):
        _create(service, _viewer(alice), client, name=f"A{i}")
    bob_surveys = [_create(service, _viewer(bob), client, name=f"B{i}") for i in range(2)]

    assert len(service.list_surveys(_viewer(alice))) == 3
    assert len(service.list_surveys(_viewer(alice), SurveyFilter())) == 3
    assert len(service.list_surveys(_viewer(manager))) == 5
    with pytest.raises(NotFoundError):
        service.get_survey(_viewer(alice), bob_surveys[0].id)
    with pytest.raises(NotFoundError):
        service.update_status(_viewer(alice), bob_surveys[0].id, "completed")


def test_archive_restore_and_permanent_delete(db_session, make_user, make_client):
    owner = make_user()
    viewer = _viewer(owner)
    service = SurveyService(db_session)
    survey = _create(service, viewer, make_client())

    with pytest.raises(ValidationError):
        service.restore(viewer, survey.id)
    with pytest.raises(ValidationError):
        service.delete_permanently(viewer, survey.id)

    service.archive(viewer, survey.id)
    assert service.list_surveys(viewer) == []
    assert [s.id for s in service.list_surveys(viewer, archived=True)] == [survey.id]

    service.restore(viewer, survey.id)
    service.archive(viewer, survey.id)
    service.delete_permanently(viewer, survey.id)

    assert db_session.get(Survey, survey.id) is None
    assert _history(db_session, survey.id) == []


def test_email_bounce_sets_date_and_records_history(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())

    service.mark_email_bounce(_viewer(owner), survey.id, today=date(2024, 2, 1))

    [entry] = _history(db_session, survey.id)
    assert entry.field_name == "last_email_bounce_date"
    assert (entry.old_value, entry.new_value) == (None, "2024-02-01")


def test_merged_history_contains_changes_and_comments_newest_first(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())
    service.update_status(_viewer(owner), survey.id, "in_writing")
    service.add_comment(_viewer(owner), survey.id, "waiting on the admin")

    items = service.merged_history(_viewer(owner), survey.id)
    assert [item["source"] for item in items] == ["comment", "history"]
    assert items[0]["comment"] == "waiting on the admin"


def test_commit_failure_surfaces_as_backend_error(db_session, make_user, make_client, monkeypatch):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())

    def _fail():
        raise OperationalError("UPDATE surveys", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", _fail)
    with pytest.raises(BackendError):
        service.update_status(_viewer(owner), survey.id, "completed")


def test_comment_text_is_stored_under_comments_key(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())

    service.add_comment(_viewer(owner), survey.id, "  admin asked for a call ")

    entry = db_session.query(AuditLog).filter(AuditLog.action == "comment").one()
    assert entry.new_values == {"comments": "admin asked for a call"}


def test_merged_history_reads_imported_comment_rows(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())
    db_session.add(
        AuditLog(
            user_id=owner.id,
            action="comment",
            table_name="surveys",
            record_id=survey.id,
            new_values={"comments": "imported note"},
        )
    )
    db_session.commit()

    [item] = service.merged_history(_viewer(owner), survey.id)
    assert item["comment"] == "imported note"


def test_edit_can_set_email_bounce_date(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    survey = _create(service, _viewer(owner), make_client())

    updated = service.update_survey(_viewer(owner), survey.id, {"last_email_bounce_date": date(2024, 3, 4)})

    assert updated.last_email_bounce_date == date(2024, 3, 4)
    [entry] = _history(db_session, survey.id)
    assert (entry.field_name, entry.new_value) == ("last_email_bounce_date", "2024-03-04")


def test_client_only_edit_is_audited(db_session, make_user, make_client):
    owner = make_user()
    service = SurveyService(db_session)
    acme = make_client("Acme")
    survey = _create(service, _viewer(owner), acme)
    other = make_client("Globex")

    service.update_survey(_viewer(owner), survey.id, {"client_id": other.id})

    assert _history(db_session, survey.id) == []
    entry = db_session.query(AuditLog).filter(AuditLog.action == "UPDATE").one()
    assert (entry.old_values["client_id"], entry.new_values["client_id"]) == (str(acme.id), str(other.id))
