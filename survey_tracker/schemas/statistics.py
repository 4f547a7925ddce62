"""Statistics response schemas."""

from __future__ import annotations

from pydantic import BaseModel


class ReminderResponse(BaseModel):
    survey_id: int
    system_name: str
    client_name: str | None = None
    status: str
    status_label: str
    owner_user_id: int
    days_since_update: int


class UserSummaryResponse(BaseModel):
    user_id: int
    full_name: str
    total: int
    status_counts: dict[str, int]


