"""Survey lifecycle and derived-metrics core (pure, storage-agnostic)."""

from survey_tracker.domain.aggregation import AggregateResult, aggregate
from survey_tracker.domain.enums import SurveyStatus, UserRole
from survey_tracker.domain.filters import SurveyFilter, apply_filter, scope_to_viewer
from survey_tracker.domain.records import HistoryRecord, RequestingUser, SurveyRecord, SystemSettings
from survey_tracker.domain.staleness import days_since_update, is_stuck, needs_reminder

__all__ = [
    "AggregateResult",
    "HistoryRecord",
    "RequestingUser",
    "SurveyFilter",
    "SurveyRecord",
    "SurveyStatus",
    "SystemSettings",
    "UserRole",
    "aggregate",
    "apply_filter",
    "days_since_update",
    "is_stuck",
    "needs_reminder",
    "scope_to_viewer",
]
