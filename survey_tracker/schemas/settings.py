"""System settings schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SystemSettingsResponse(BaseModel):
    stuck_threshold_days: int
    status_colors: dict[str, str]
    status_labels: dict[str, str]
    email_templates: dict[str, str] = Field(default_factory=dict)


class SystemSettingsUpdateRequest(BaseModel):
    stuck_threshold_days: int | None = None
    status_colors: dict[str, str] | None = None
    email_templates: dict[str, str] | None = None
