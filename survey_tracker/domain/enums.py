"""Canonical enum values shared by the domain core and the persistence schema."""

from __future__ import annotations

import enum


class SurveyStatus(str, enum.Enum):
    """Workflow statuses in catalog order. No transition graph is enforced."""

    RECEIVED = "received"
    EMAIL_SENT_TO_ADMIN = "email_sent_to_admin"
    MEETING_SCHEDULED = "meeting_scheduled"
    IN_WRITING = "in_writing"
    COMPLETION_QUESTIONS_WITH_ADMIN = "completion_questions_with_admin"
    CHEN_REVIEW = "chen_review"
    COMPLETED = "completed"


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    SURVEYOR = "surveyor"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"


class RiskLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AuditAction(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    COMMENT = "comment"
    UPDATE_SYSTEM_SETTINGS = "UPDATE_SYSTEM_SETTINGS"
    RESET_PASSWORD = "RESET_PASSWORD"


def enum_value(value: object) -> str:
    """Return the raw string for enum members and the ``str()`` of anything else."""
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)
