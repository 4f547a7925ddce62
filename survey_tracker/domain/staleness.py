"""Staleness evaluation: days since last update, stuck and reminder predicates."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from survey_tracker.domain.enums import SurveyStatus, enum_value

SECONDS_PER_DAY = 24 * 60 * 60

# Statuses that never count as stuck / never get a reminder.
_NOT_STUCK = frozenset({SurveyStatus.COMPLETED.value})
_NO_REMINDER = frozenset({SurveyStatus.COMPLETED.value, SurveyStatus.MEETING_SCHEDULED.value})


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps (as returned by SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def days_since_update(survey: Any, now: datetime | None = None) -> int:
    """Whole days elapsed since ``survey.updated_at``, floored.

    23h59m ago is 0 days, exactly 24h ago is 1. A timestamp in the future
    (clock skew between writers) reports 0.
    """
    now = as_utc(now or utcnow())
    elapsed = (now - as_utc(survey.updated_at)).total_seconds()
    return max(int(elapsed // SECONDS_PER_DAY), 0)


def is_stuck(survey: Any, threshold_days: int, now: datetime | None = None) -> bool:
    """KPI predicate: idle longer than the threshold and not completed."""
    if enum_value(survey.status) in _NOT_STUCK:
        return False
    return days_since_update(survey, now) > threshold_days


def needs_reminder(survey: Any, threshold_days: int, now: datetime | None = None) -> bool:
    """Alert predicate for the reminders view: ``is_stuck`` minus scheduled meetings.

    KPI and chart counts use ``is_stuck``; only actionable alerts use this one.
    """
    if enum_value(survey.status) in _NO_REMINDER:
        return False
    return days_since_update(survey, now) > threshold_days
