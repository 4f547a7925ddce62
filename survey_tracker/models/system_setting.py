"""System setting key/value model module."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from survey_tracker.models.base import Base, TimestampMixin

STUCK_THRESHOLD_KEY = "stuck_survey_threshold_days"
STATUS_COLORS_KEY = "status_colors"
EMAIL_TEMPLATES_KEY = "email_templates"


class SystemSetting(Base, TimestampMixin):
    __tablename__ = "system_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    setting_key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    setting_value: Mapped[Any] = mapped_column(JSON)
