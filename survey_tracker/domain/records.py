"""Storage-agnostic value types consumed by the lifecycle and metrics functions.

Persistence models are converted into these records at the service boundary so
that staleness, aggregation and filtering stay pure and easy to test.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Mapping

from survey_tracker.domain.enums import UserRole, enum_value


@dataclass(frozen=True)
class SurveyRecord:
    id: int
    client_id: int | None
    client_name: str | None
    system_name: str
    status: str
    owner_user_id: int
    created_at: datetime
    updated_at: datetime
    is_archived: bool = False
    system_description: str | None = None
    survey_date: date | None = None
    received_date: date | None = None
    last_email_bounce_date: date | None = None

    @classmethod
    def from_model(cls, survey: Any) -> "SurveyRecord":
        """Build a record from any object exposing the survey attributes."""
        client = getattr(survey, "client", None)
        return cls(
            id=survey.id,
            client_id=survey.client_id,
            client_name=getattr(client, "name", None),
            system_name=survey.system_name,
            status=enum_value(survey.status),
            owner_user_id=survey.owner_user_id,
            created_at=survey.created_at,
            updated_at=survey.updated_at,
            is_archived=bool(survey.is_archived),
            system_description=survey.system_description,
            survey_date=survey.survey_date,
            received_date=survey.received_date,
            last_email_bounce_date=survey.last_email_bounce_date,
        )


@dataclass(frozen=True)
class HistoryRecord:
    survey_id: int
    field_name: str
    old_value: str | None
    new_value: str | None
    user_id: int
    created_at: datetime


def _frozen_mapping(value: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class SystemSettings:
    """Admin-managed configuration passed explicitly into staleness and metrics calls."""

    stuck_threshold_days: int = 5
    status_colors: Mapping[str, str] = field(default_factory=dict)
    email_templates: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "status_colors", _frozen_mapping(self.status_colors))
        object.__setattr__(self, "email_templates", _frozen_mapping(self.email_templates))


@dataclass(frozen=True)
class RequestingUser:
    """Identity on whose behalf a fetch runs; drives visibility scoping."""

    user_id: int
    role: str

    @property
    def sees_all_surveys(self) -> bool:
        return enum_value(self.role) in {UserRole.ADMIN.value, UserRole.MANAGER.value}

    @property
    def is_admin(self) -> bool:
        return enum_value(self.role) == UserRole.ADMIN.value
