"""Dashboard aggregation over an already-scoped collection of surveys.

Every function here is pure: same inputs, same output, no I/O. Missing
relational data degrades to an ``"unknown"`` bucket or a zero instead of
raising, so dashboards keep rendering when a client row has gone away.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from survey_tracker.domain import statuses
from survey_tracker.domain.enums import SurveyStatus, enum_value
from survey_tracker.domain.records import HistoryRecord, SystemSettings
from survey_tracker.domain.staleness import as_utc, days_since_update, is_stuck, utcnow

UNKNOWN_CLIENT = "unknown"
COMPLETED = SurveyStatus.COMPLETED.value


@dataclass(frozen=True)
class ClientCount:
    client_key: str
    client_id: int | None
    client_name: str
    count: int


@dataclass(frozen=True)
class StatusCount:
    status: str
    label: str
    count: int


@dataclass(frozen=True)
class StatusAge:
    status: str
    label: str
    average_days: float
    stuck_count: int


@dataclass(frozen=True)
class MonthBucket:
    year: int
    month: int
    created: int = 0
    completed: int = 0


@dataclass(frozen=True)
class OwnerCount:
    owner_user_id: int
    total: int
    status_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Kpis:
    total: int
    unique_clients: int
    active: int
    awaiting_completion_answers: int
    stuck: int


@dataclass(frozen=True)
class AggregateResult:
    kpis: Kpis
    by_client: list[ClientCount]
    by_status: list[StatusCount]
    status_ages: list[StatusAge]
    monthly_trend: list[MonthBucket]
    by_owner: list[OwnerCount]


def _active(surveys: Iterable[Any]) -> list[Any]:
    return [s for s in surveys if not getattr(s, "is_archived", False)]


def _client_name(survey: Any) -> str | None:
    name = getattr(survey, "client_name", None)
    if name is None:
        name = getattr(getattr(survey, "client", None), "name", None)
    return name or None


def _ordered_statuses(present: Iterable[str], include_empty: bool) -> list[str]:
    """Catalog order first, then unknown persisted values in first-seen order."""
    present = list(dict.fromkeys(present))
    catalog = [status.value for status in statuses.all_statuses()]
    ordered = [s for s in catalog if include_empty or s in present]
    ordered.extend(s for s in present if s not in catalog)
    return ordered


def count_by_client(surveys: Sequence[Any]) -> list[ClientCount]:
    counts: Counter[str] = Counter()
    meta: dict[str, tuple[int | None, str]] = {}
    for survey in _active(surveys):
        name = _client_name(survey)
        if name is None or survey.client_id is None:
            key, client_id, name = UNKNOWN_CLIENT, None, UNKNOWN_CLIENT
        else:
            key, client_id = str(survey.client_id), survey.client_id
        counts[key] += 1
        meta.setdefault(key, (client_id, name))
    return [
        ClientCount(client_key=key, client_id=meta[key][0], client_name=meta[key][1], count=count)
        for key, count in counts.items()
    ]


def count_by_status(
    surveys: Sequence[Any],
    status_labels: Mapping[str, str] | None = None,
    include_empty: bool = False,
) -> list[StatusCount]:
    counts = Counter(enum_value(s.status) for s in _active(surveys))
    return [
        StatusCount(status=status, label=statuses.label(status, status_labels), count=counts.get(status, 0))
        for status in _ordered_statuses(counts, include_empty)
    ]


def status_ages(
    surveys: Sequence[Any],
    threshold_days: int,
    now: datetime | None = None,
    status_labels: Mapping[str, str] | None = None,
    include_empty: bool = False,
) -> list[StatusAge]:
    """Mean days-since-update and stuck count per status (0 for empty buckets)."""
    now = now or utcnow()
    grouped: dict[str, list[Any]] = defaultdict(list)
    for survey in _active(surveys):
        grouped[enum_value(survey.status)].append(survey)

    result = []
    for status in _ordered_statuses(grouped, include_empty):
        members = grouped.get(status, [])
        ages = [days_since_update(s, now) for s in members]
        result.append(
            StatusAge(
                status=status,
                label=statuses.label(status, status_labels),
                average_days=(sum(ages) / len(ages)) if ages else 0.0,
                stuck_count=sum(1 for s in members if is_stuck(s, threshold_days, now)),
            )
        )
    return result


def monthly_trend_by_creation_month(surveys: Sequence[Any]) -> list[MonthBucket]:
    """Created/completed per creation month, oldest first.

    ``completed`` counts surveys whose *current* status is completed in the
    month they were *created*. A survey created in January and completed in
    March is a January completion here. See
    ``monthly_completions_by_transition`` for completion-month attribution.
    """
    created: Counter[tuple[int, int]] = Counter()
    completed: Counter[tuple[int, int]] = Counter()
    for survey in _active(surveys):
        stamp = as_utc(survey.created_at)
        key = (stamp.year, stamp.month)
        created[key] += 1
        if enum_value(survey.status) == COMPLETED:
            completed[key] += 1
    return [
        MonthBucket(year=year, month=month, created=created[(year, month)], completed=completed[(year, month)])
        for year, month in sorted(created)
    ]


def monthly_completions_by_transition(history: Iterable[HistoryRecord]) -> list[MonthBucket]:
    """Completions attributed to the month the status last moved to completed.

    Only the latest transition per survey counts, and a survey whose last
    status change moved it away from completed is not counted at all.
    """
    last_change: dict[int, HistoryRecord] = {}
    for entry in history:
        if entry.field_name != "status":
            continue
        previous = last_change.get(entry.survey_id)
        if previous is None or as_utc(entry.created_at) >= as_utc(previous.created_at):
            last_change[entry.survey_id] = entry

    completed: Counter[tuple[int, int]] = Counter()
    for entry in last_change.values():
        if entry.new_value == COMPLETED:
            stamp = as_utc(entry.created_at)
            completed[(stamp.year, stamp.month)] += 1
    return [
        MonthBucket(year=year, month=month, completed=count) for (year, month), count in sorted(completed.items())
    ]


def count_by_owner(surveys: Sequence[Any]) -> list[OwnerCount]:
    grouped: dict[int, Counter[str]] = defaultdict(Counter)
    for survey in _active(surveys):
        grouped[survey.owner_user_id][enum_value(survey.status)] += 1
    return [
        OwnerCount(owner_user_id=owner, total=sum(counter.values()), status_counts=dict(counter))
        for owner, counter in grouped.items()
    ]


def compute_kpis(surveys: Sequence[Any], threshold_days: int, now: datetime | None = None) -> Kpis:
    active = _active(surveys)
    now = now or utcnow()
    return Kpis(
        total=len(active),
        unique_clients=len({name for name in (_client_name(s) for s in active) if name}),
        active=sum(1 for s in active if enum_value(s.status) != COMPLETED),
        awaiting_completion_answers=sum(
            1 for s in active if enum_value(s.status) == SurveyStatus.COMPLETION_QUESTIONS_WITH_ADMIN.value
        ),
        stuck=sum(1 for s in active if is_stuck(s, threshold_days, now)),
    )


def aggregate(
    surveys: Sequence[Any],
    settings: SystemSettings,
    now: datetime | None = None,
    status_labels: Mapping[str, str] | None = None,
    include_empty_statuses: bool = False,
) -> AggregateResult:
    """Compute every dashboard series for ``surveys`` in one pass per series."""
    now = now or utcnow()
    threshold = settings.stuck_threshold_days
    return AggregateResult(
        kpis=compute_kpis(surveys, threshold, now),
        by_client=count_by_client(surveys),
        by_status=count_by_status(surveys, status_labels, include_empty_statuses),
        status_ages=status_ages(surveys, threshold, now, status_labels, include_empty_statuses),
        monthly_trend=monthly_trend_by_creation_month(surveys),
        by_owner=count_by_owner(surveys),
    )
