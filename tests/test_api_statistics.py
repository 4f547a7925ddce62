from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from survey_tracker.models import Survey

API = "/api/v1"


def _stale_survey(db_session, client, owner, status, idle_days, name):
    now = datetime.now(timezone.utc)
    db_session.add(
        Survey(
            client_id=client.id,
            owner_user_id=owner.id,
            system_name=name,
            survey_date=date(2024, 3, 1),
            status=status,
            created_at=now - timedelta(days=30),
            updated_at=now - timedelta(days=idle_days),
        )
    )
    db_session.commit()


def test_reminders_are_narrowed_by_status_filter(api_client, db_session, make_user, make_client, auth_header):
    user = make_user()
    client = make_client()
    _stale_survey(db_session, client, user, "in_writing", 10, "Draft")
    _stale_survey(db_session, client, user, "email_sent_to_admin", 20, "Waiting")
    headers = auth_header(user)

    everything = api_client.get(f"{API}/statistics/reminders", headers=headers).json()
    narrowed = api_client.get(f"{API}/statistics/reminders", params={"status": "in_writing"}, headers=headers).json()

    assert [item["system_name"] for item in everything] == ["Waiting", "Draft"]
    assert [item["system_name"] for item in narrowed] == ["Draft"]


def test_user_summary_is_narrowed_by_search(api_client, db_session, make_user, make_client, auth_header):
    manager = make_user(role="manager")
    client = make_client()
    _stale_survey(db_session, client, manager, "received", 1, "Payroll")
    _stale_survey(db_session, client, manager, "received", 1, "CRM")

    rows = api_client.get(
        f"{API}/statistics/users", params={"search": "pay"}, headers=auth_header(manager)
    ).json()

    assert [row["total"] for row in rows if row["user_id"] == manager.id] == [1]
