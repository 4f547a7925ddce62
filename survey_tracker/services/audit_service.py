"""Append-only audit log writer and reader."""

from __future__ import annotations

from typing import Any

from survey_tracker.core.exceptions import AuthorizationError
from survey_tracker.domain.enums import enum_value
from survey_tracker.domain.records import RequestingUser
from survey_tracker.models import AuditLog, User
from survey_tracker.services.base_service import BaseService

UNKNOWN_USER = "unknown user"


class AuditService(BaseService):
    """Writes rows in the caller's transaction; the caller commits."""

    def record(
        self,
        user_id: int | None,
        action: Any,
        table_name: str,
        record_id: int | None = None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            user_id=user_id,
            action=enum_value(action),
            table_name=table_name,
            record_id=record_id,
            old_values=old_values,
            new_values=new_values,
        )
        self.db.add(entry)
        return entry

    def list_recent(self, viewer: RequestingUser, limit: int = 100) -> list[dict[str, Any]]:
        """Latest entries first, joined with the acting user's display name."""
        if not viewer.sees_all_surveys:
            raise AuthorizationError("Audit log is restricted to admins and managers.")

        rows = (
            self.db.query(AuditLog, User)
            .outerjoin(User, AuditLog.user_id == User.id)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(limit)
            .all()
        )
        return [
            {
                "id": entry.id,
                "user_id": entry.user_id,
                "user_name": user.full_name if user is not None else UNKNOWN_USER,
                "action": entry.action,
                "table_name": entry.table_name,
                "record_id": entry.record_id,
                "old_values": entry.old_values,
                "new_values": entry.new_values,
                "created_at": entry.created_at,
            }
            for entry, user in rows
        ]

    def comments_for(self, table_name: str, record_id: int) -> list[AuditLog]:
        return (
            self.db.query(AuditLog)
            .filter(
                AuditLog.table_name == table_name,
                AuditLog.record_id == record_id,
                AuditLog.action == "comment",
            )
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .all()
        )
