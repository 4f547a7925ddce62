from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from survey_tracker.domain.filters import SurveyFilter
from survey_tracker.domain.records import RequestingUser
from survey_tracker.models import Survey
from survey_tracker.services.statistics_service import StatisticsService

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def _add(db_session, client, owner, status, idle_days, archived=False, name="System"):
    survey = Survey(
        client_id=client.id,
        owner_user_id=owner.id,
        system_name=name,
        survey_date=date(2024, 3, 1),
        status=status,
        is_archived=archived,
        created_at=NOW - timedelta(days=20),
        updated_at=NOW - timedelta(days=idle_days),
    )
    db_session.add(survey)
    db_session.commit()
    return survey


def test_overview_uses_scoped_non_archived_surveys(db_session, make_user, make_client):
    alice = make_user()
    bob = make_user()
    client = make_client()
    _add(db_session, client, alice, "in_writing", 7)
    _add(db_session, client, alice, "completed", 30)
    _add(db_session, client, alice, "received", 1, archived=True)
    _add(db_session, client, bob, "received", 1)

    service = StatisticsService(db_session)
    mine = service.overview(RequestingUser(alice.id, "surveyor"), now=NOW)
    everyone = service.overview(RequestingUser(bob.id, "manager"), now=NOW)

    assert mine["kpis"]["total"] == 2
    assert mine["kpis"]["stuck"] == 1
    assert everyone["kpis"]["total"] == 3
    assert sum(item["count"] for item in everyone["by_status"]) == 3
    assert mine["stuck_threshold_days"] == 5


def test_surveyor_cannot_widen_scope_with_owner_filter(db_session, make_user, make_client):
    alice = make_user()
    bob = make_user()
    client = make_client()
    _add(db_session, client, bob, "received", 1)
    criteria = SurveyFilter(owner_user_id=bob.id)

    result = StatisticsService(db_session).overview(RequestingUser(alice.id, "surveyor"), criteria, now=NOW)

    assert result["kpis"]["total"] == 0


def test_reminders_skip_scheduled_meetings_and_completed(db_session, make_user, make_client):
    user = make_user()
    client = make_client()
    _add(db_session, client, user, "meeting_scheduled", 10, name="Meeting")
    _add(db_session, client, user, "completed", 10, name="Done")
    _add(db_session, client, user, "email_sent_to_admin", 12, name="Waiting")
    _add(db_session, client, user, "in_writing", 2, name="Fresh")

    reminders = StatisticsService(db_session).reminders(RequestingUser(user.id, "admin"), now=NOW)

    assert [(item["system_name"], item["days_since_update"]) for item in reminders] == [("Waiting", 12)]


def test_user_summary_lists_profiles_with_zero_counts(db_session, make_user, make_client):
    alice = make_user(first_name="Alice")
    make_user(first_name="Bob")
    _add(db_session, make_client(), alice, "received", 1)

    summary = StatisticsService(db_session).user_summary(RequestingUser(alice.id, "admin"))

    assert [(row["full_name"], row["total"]) for row in summary] == [("Alice Cohen", 1), ("Bob Cohen", 0)]
    assert summary[0]["status_counts"] == {"received": 1}


def test_overview_lists_only_statuses_present(db_session, make_user, make_client):
    manager = make_user(role="manager")
    _add(db_session, make_client(), manager, "in_writing", 2)

    result = StatisticsService(db_session).overview(RequestingUser(manager.id, "manager"), now=NOW)

    assert [item["status"] for item in result["by_status"]] == ["in_writing"]
    assert [item["status"] for item in result["status_ages"]] == ["in_writing"]


def test_reminders_and_summary_respect_filter(db_session, make_user, make_client):
    user = make_user(first_name="Alice")
    client = make_client()
    _add(db_session, client, user, "in_writing", 9, name="Draft")
    _add(db_session, client, user, "email_sent_to_admin", 12, name="Waiting")
    viewer = RequestingUser(user.id, "admin")
    criteria = SurveyFilter(status="in_writing")
    service = StatisticsService(db_session)

    reminders = service.reminders(viewer, criteria, now=NOW)
    summary = service.user_summary(viewer, criteria)

    assert [item["system_name"] for item in reminders] == ["Draft"]
    assert summary[0]["status_counts"] == {"in_writing": 1}
