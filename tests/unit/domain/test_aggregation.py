from __future__ import annotations

from datetime import datetime, timedelta, timezone

from survey_tracker.domain.aggregation import (
    UNKNOWN_CLIENT,
    aggregate,
    count_by_client,
    count_by_status,
    monthly_completions_by_transition,
    monthly_trend_by_creation_month,
    status_ages,
)
from survey_tracker.domain.records import HistoryRecord, SurveyRecord, SystemSettings

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def _survey(
    survey_id: int,
    status: str = "received",
    created_at: datetime = NOW,
    idle_days: int = 0,
    client: tuple[int | None, str | None] = (1, "Acme"),
    owner: int = 1,
    archived: bool = False,
) -> SurveyRecord:
    return SurveyRecord(
        id=survey_id,
        client_id=client[0],
        client_name=client[1],
        system_name=f"System {survey_id}",
        status=status,
        owner_user_id=owner,
        created_at=created_at,
        updated_at=NOW - timedelta(days=idle_days),
        is_archived=archived,
    )


def test_status_counts_sum_to_number_of_active_surveys():
    surveys = [
        _survey(1, "received"),
        _survey(2, "in_writing"),
        _survey(3, "in_writing"),
        _survey(4, "completed"),
        _survey(5, "completed", archived=True),
    ]
    counts = count_by_status(surveys, include_empty=True)
    assert sum(item.count for item in counts) == 4
    assert {item.status: item.count for item in counts}["in_writing"] == 2
    assert len(counts) == 7


def test_empty_status_bucket_has_zero_average_age():
    ages = status_ages([_survey(1, "received", idle_days=3)], threshold_days=5, now=NOW, include_empty=True)
    by_status = {item.status: item for item in ages}
    assert by_status["chen_review"].average_days == 0
    assert by_status["chen_review"].stuck_count == 0
    assert by_status["received"].average_days == 3


def test_status_ages_average_and_stuck_count():
    surveys = [
        _survey(1, "in_writing", idle_days=2),
        _survey(2, "in_writing", idle_days=10),
        _survey(3, "completed", idle_days=30),
    ]
    by_status = {item.status: item for item in status_ages(surveys, threshold_days=5, now=NOW)}
    assert by_status["in_writing"].average_days == 6.0
    assert by_status["in_writing"].stuck_count == 1
    assert by_status["completed"].stuck_count == 0


def test_unknown_status_gets_its_own_bucket_after_catalog():
    counts = count_by_status([_survey(1, "legacy_state"), _survey(2, "received")])
    assert [item.status for item in counts] == ["received", "legacy_state"]
    assert counts[-1].label == "legacy_state"


def test_surveys_without_client_land_in_unknown_bucket():
    counts = count_by_client([_survey(1, client=(None, None)), _survey(2), _survey(3, client=(7, None))])
    by_key = {item.client_key: item.count for item in counts}
    assert by_key == {UNKNOWN_CLIENT: 2, "1": 1}


def test_monthly_trend_counts_completion_in_creation_month():
    surveys = [
        _survey(1, "received", created_at=datetime(2024, 1, 5, tzinfo=timezone.utc)),
        _survey(2, "completed", created_at=datetime(2024, 1, 20, tzinfo=timezone.utc)),
        _survey(3, "received", created_at=datetime(2024, 2, 2, tzinfo=timezone.utc)),
    ]
    buckets = {(b.year, b.month): (b.created, b.completed) for b in monthly_trend_by_creation_month(surveys)}
    assert buckets == {(2024, 1): (2, 1), (2024, 2): (1, 0)}


def test_completions_by_transition_use_the_month_status_changed():
    history = [
        HistoryRecord(1, "status", "received", "completed", 1, datetime(2024, 3, 2, tzinfo=timezone.utc)),
        HistoryRecord(2, "status", "received", "completed", 1, datetime(2024, 2, 2, tzinfo=timezone.utc)),
        HistoryRecord(2, "status", "completed", "in_writing", 1, datetime(2024, 2, 9, tzinfo=timezone.utc)),
        HistoryRecord(3, "system_name", "a", "completed", 1, datetime(2024, 2, 9, tzinfo=timezone.utc)),
    ]
    buckets = monthly_completions_by_transition(history)
    assert [(b.year, b.month, b.completed) for b in buckets] == [(2024, 3, 1)]


def test_aggregate_kpis():
    surveys = [
        _survey(1, "received", idle_days=9, client=(1, "Acme")),
        _survey(2, "completion_questions_with_admin", client=(2, "Globex")),
        _survey(3, "completed", idle_days=40, client=(1, "Acme")),
        _survey(4, "in_writing", archived=True),
    ]
    result = aggregate(surveys, SystemSettings(stuck_threshold_days=5), now=NOW)
    assert result.kpis.total == 3
    assert result.kpis.unique_clients == 2
    assert result.kpis.active == 2
    assert result.kpis.awaiting_completion_answers == 1
    assert result.kpis.stuck == 1
    assert sum(item.total for item in result.by_owner) == 3


def test_aggregate_of_nothing_is_all_zero():
    result = aggregate([], SystemSettings(), now=NOW, include_empty_statuses=True)
    assert result.kpis.total == 0
    assert all(item.count == 0 for item in result.by_status)
    assert all(item.average_days == 0 for item in result.status_ages)
    assert result.monthly_trend == []
