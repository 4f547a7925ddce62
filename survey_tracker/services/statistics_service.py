"""Dashboard statistics over the caller-scoped, filtered, non-archived surveys."""

from __future__ import annotations

from dataclasses import asdict, replace
from datetime import datetime
from typing import Any

from survey_tracker.domain import statuses
from survey_tracker.domain.aggregation import aggregate, count_by_owner, monthly_completions_by_transition
from survey_tracker.domain.filters import SurveyFilter
from survey_tracker.domain.records import RequestingUser
from survey_tracker.domain.staleness import days_since_update, needs_reminder, utcnow
from survey_tracker.models import User
from survey_tracker.services.base_service import BaseService
from survey_tracker.services.settings_service import SettingsService
from survey_tracker.services.survey_service import SurveyService


class StatisticsService(BaseService):
    def _records(self, viewer: RequestingUser, criteria: SurveyFilter | None):
        if criteria is not None and not viewer.sees_all_surveys:
            criteria = replace(criteria, owner_user_id=None)
        return SurveyService(self.db).fetch_records(viewer, criteria)

    def overview(
        self,
        viewer: RequestingUser,
        criteria: SurveyFilter | None = None,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        now = now or utcnow()
        settings = SettingsService(self.db).load()
        records = self._records(viewer, criteria)
        result = aggregate(records, settings, now=now)
        return {
            **asdict(result),
            "stuck_threshold_days": settings.stuck_threshold_days,
            "status_colors": dict(settings.status_colors),
        }

    def reminders(
        self,
        viewer: RequestingUser,
        criteria: SurveyFilter | None = None,
        now: datetime | None = None,
    ) -> list[dict[str, Any]]:
        """Surveys idle past the threshold, excluding completed and scheduled meetings."""
        now = now or utcnow()
        threshold = SettingsService(self.db).load().stuck_threshold_days
        items = [
            {
                "survey_id": record.id,
                "system_name": record.system_name,
                "client_name": record.client_name,
                "status": record.status,
                "status_label": statuses.label(record.status),
                "owner_user_id": record.owner_user_id,
                "days_since_update": days_since_update(record, now),
            }
            for record in self._records(viewer, criteria)
            if needs_reminder(record, threshold, now)
        ]
        items.sort(key=lambda item: item["days_since_update"], reverse=True)
        return items

    def user_summary(self, viewer: RequestingUser, criteria: SurveyFilter | None = None) -> list[dict[str, Any]]:
        """Per-profile totals; profiles without surveys are listed with zeros."""
        counts = {item.owner_user_id: item for item in count_by_owner(self._records(viewer, criteria))}
        users = self.db.query(User).order_by(User.first_name.asc(), User.last_name.asc()).all()
        if not viewer.sees_all_surveys:
            users = [user for user in users if user.id == viewer.user_id]
        summary = []
        for user in users:
            owned = counts.get(user.id)
            summary.append(
                {
                    "user_id": user.id,
                    "full_name": user.full_name,
                    "total": owned.total if owned else 0,
                    "status_counts": dict(owned.status_counts) if owned else {},
                }
            )
        return summary

    def completions_by_transition(self, viewer: RequestingUser) -> list[dict[str, Any]]:
        history = SurveyService(self.db).history_records(viewer)
        return [asdict(bucket) for bucket in monthly_completions_by_transition(history)]
