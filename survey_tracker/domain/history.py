"""Audit-trail contract for survey mutations.

Whenever a tracked field changes, the persistence layer must append exactly one
history entry holding the canonical string form of the old and new value,
attributed to the acting user and stamped with the mutation time. This module
computes those entries; the caller writes them in the same transaction as the
update itself.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from survey_tracker.domain.records import HistoryRecord
from survey_tracker.domain.staleness import utcnow

TRACKED_FIELDS: tuple[str, ...] = (
    "status",
    "is_archived",
    "survey_date",
    "received_date",
    "system_name",
    "system_description",
)
EMAIL_BOUNCE_FIELD = "last_email_bounce_date"


@dataclass(frozen=True)
class FieldChange:
    field_name: str
    old_value: str | None
    new_value: str | None


def canonical_value(value: Any) -> str | None:
    """String form stored in history rows. ``None`` stays ``None``."""
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def snapshot(survey: Any, fields: Iterable[str] = TRACKED_FIELDS) -> dict[str, str | None]:
    return {name: canonical_value(getattr(survey, name, None)) for name in fields}


def diff_tracked_fields(
    before: Mapping[str, Any],
    after: Mapping[str, Any],
    fields: Iterable[str] = TRACKED_FIELDS,
) -> list[FieldChange]:
    """One ``FieldChange`` per field whose canonical value differs."""
    changes = []
    for name in fields:
        old = canonical_value(before.get(name))
        new = canonical_value(after.get(name))
        if old != new:
            changes.append(FieldChange(field_name=name, old_value=old, new_value=new))
    return changes


def build_history_entries(
    survey_id: int,
    changes: Iterable[FieldChange],
    user_id: int,
    at: datetime | None = None,
) -> list[HistoryRecord]:
    at = at or utcnow()
    return [
        HistoryRecord(
            survey_id=survey_id,
            field_name=change.field_name,
            old_value=change.old_value,
            new_value=change.new_value,
            user_id=user_id,
            created_at=at,
        )
        for change in changes
    ]
