"""Status catalog: the seven workflow states and their display metadata."""

from __future__ import annotations

from collections.abc import Mapping

from survey_tracker.core.exceptions import ValidationError
from survey_tracker.domain.enums import SurveyStatus, enum_value

STATUS_LABELS: dict[str, str] = {
    SurveyStatus.RECEIVED.value: "התקבל",
    SurveyStatus.EMAIL_SENT_TO_ADMIN.value: "נשלח מייל תיאום למנהל מערכת",
    SurveyStatus.MEETING_SCHEDULED.value: "פגישה נקבעה",
    SurveyStatus.IN_WRITING.value: "בכתיבה",
    SurveyStatus.COMPLETION_QUESTIONS_WITH_ADMIN.value: "שאלות השלמה מול מנהל מערכת",
    SurveyStatus.CHEN_REVIEW.value: "בבקרה של חן",
    SurveyStatus.COMPLETED.value: "הסתיים",
}

DEFAULT_STATUS_COLORS: dict[str, str] = {
    SurveyStatus.RECEIVED.value: "#4FC3F7",
    SurveyStatus.EMAIL_SENT_TO_ADMIN.value: "#7E57C2",
    SurveyStatus.MEETING_SCHEDULED.value: "#81C784",
    SurveyStatus.IN_WRITING.value: "#FFB74D",
    SurveyStatus.COMPLETION_QUESTIONS_WITH_ADMIN.value: "#FB8C00",
    SurveyStatus.CHEN_REVIEW.value: "#8E24AA",
    SurveyStatus.COMPLETED.value: "#388E3C",
}

FALLBACK_COLOR = "#9E9E9E"
INITIAL_STATUS = SurveyStatus.RECEIVED


def all_statuses() -> tuple[SurveyStatus, ...]:
    """Return every status in fixed catalog order."""
    return tuple(SurveyStatus)


def is_valid_status(value: object) -> bool:
    return enum_value(value) in STATUS_LABELS


def parse_status(value: object) -> SurveyStatus:
    """Coerce ``value`` into a catalog status or raise a field-level validation error."""
    raw = enum_value(value)
    try:
        return SurveyStatus(raw)
    except ValueError as exc:
        raise ValidationError(f"Unknown survey status: {raw}", field="status") from exc


def label(status: object, labels: Mapping[str, str] | None = None) -> str:
    """Human label for ``status``; unknown persisted values render as themselves."""
    raw = enum_value(status)
    return (labels or STATUS_LABELS).get(raw, raw)


def color(status: object, overrides: Mapping[str, str] | None = None) -> str:
    raw = enum_value(status)
    if overrides and overrides.get(raw):
        return overrides[raw]
    return DEFAULT_STATUS_COLORS.get(raw, FALLBACK_COLOR)
