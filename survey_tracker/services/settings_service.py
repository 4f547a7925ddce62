"""Persisted system settings: stuck threshold, status colours, email templates."""

from __future__ import annotations

import logging
from typing import Any

from survey_tracker.core.config import get_config
from survey_tracker.core.exceptions import AuthorizationError, ValidationError
from survey_tracker.core.logging import LogContext, build_log_event
from survey_tracker.domain import statuses
from survey_tracker.domain.enums import AuditAction
from survey_tracker.domain.records import RequestingUser, SystemSettings
from survey_tracker.models import SystemSetting
from survey_tracker.models.system_setting import EMAIL_TEMPLATES_KEY, STATUS_COLORS_KEY, STUCK_THRESHOLD_KEY
from survey_tracker.services.audit_service import AuditService
from survey_tracker.services.base_service import BaseService
from survey_tracker.utils.validators import validate_hex_color

logger = logging.getLogger(__name__)


def _validate_threshold(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError("Stuck threshold must be a positive integer.", field="stuck_threshold_days")
    return value


def _validate_colors(colors: dict[str, Any]) -> dict[str, str]:
    cleaned = {}
    for status, value in colors.items():
        if not statuses.is_valid_status(status):
            raise ValidationError(f"Unknown survey status: {status}", field="status_colors")
        cleaned[status] = validate_hex_color(value, field="status_colors")
    return cleaned


class SettingsService(BaseService):
    def _rows(self) -> dict[str, SystemSetting]:
        return {row.setting_key: row for row in self.db.query(SystemSetting).all()}

    def load(self) -> SystemSettings:
        """Current settings; missing keys fall back to process defaults."""
        rows = self._rows()
        threshold = get_config().DEFAULT_STUCK_THRESHOLD_DAYS
        if STUCK_THRESHOLD_KEY in rows:
            try:
                threshold = int(rows[STUCK_THRESHOLD_KEY].setting_value)
            except (TypeError, ValueError):
                logger.warning(
                    "settings.invalid_threshold",
                    extra=build_log_event("settings.invalid_threshold", value=rows[STUCK_THRESHOLD_KEY].setting_value),
                )

        colors = dict(statuses.DEFAULT_STATUS_COLORS)
        if STATUS_COLORS_KEY in rows and isinstance(rows[STATUS_COLORS_KEY].setting_value, dict):
            colors.update(rows[STATUS_COLORS_KEY].setting_value)

        templates = {}
        if EMAIL_TEMPLATES_KEY in rows and isinstance(rows[EMAIL_TEMPLATES_KEY].setting_value, dict):
            templates = dict(rows[EMAIL_TEMPLATES_KEY].setting_value)

        return SystemSettings(stuck_threshold_days=threshold, status_colors=colors, email_templates=templates)

    def _upsert(self, rows: dict[str, SystemSetting], key: str, value: Any) -> None:
        row = rows.get(key)
        if row is None:
            self.db.add(SystemSetting(setting_key=key, setting_value=value))
        else:
            row.setting_value = value

    def update(
        self,
        viewer: RequestingUser,
        stuck_threshold_days: int | None = None,
        status_colors: dict[str, str] | None = None,
        email_templates: dict[str, str] | None = None,
    ) -> SystemSettings:
        if not viewer.is_admin:
            raise AuthorizationError("Only admins can change system settings.")

        new_values: dict[str, Any] = {}
        if stuck_threshold_days is not None:
            new_values[STUCK_THRESHOLD_KEY] = _validate_threshold(stuck_threshold_days)
        if status_colors is not None:
            new_values[STATUS_COLORS_KEY] = _validate_colors(status_colors)
        if email_templates is not None:
            new_values[EMAIL_TEMPLATES_KEY] = {str(k): str(v) for k, v in email_templates.items()}
        if not new_values:
            return self.load()

        rows = self._rows()
        old_values = {key: rows[key].setting_value for key in new_values if key in rows}
        for key, value in new_values.items():
            self._upsert(rows, key, value)

        AuditService(self.db).record(
            user_id=viewer.user_id,
            action=AuditAction.UPDATE_SYSTEM_SETTINGS,
            table_name="system_settings",
            old_values=old_values or None,
            new_values=new_values,
        )
        self.commit()
        logger.info(
            "settings.updated",
            extra=build_log_event(
                "settings.updated",
                LogContext(user_id=viewer.user_id, role=viewer.role),
                keys=sorted(new_values),
            ),
        )
        return self.load()
