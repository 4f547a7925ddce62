"""Survey persistence: scoped fetches and mutations that keep the history trail."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any

from sqlalchemy.orm import joinedload, selectinload

from survey_tracker.core.exceptions import NotFoundError, ValidationError
from survey_tracker.core.logging import LogContext, build_log_event
from survey_tracker.domain import statuses
from survey_tracker.domain.enums import AuditAction
from survey_tracker.domain.filters import SurveyFilter, apply_filter, visible_owner_id
from survey_tracker.domain.history import (
    EMAIL_BOUNCE_FIELD,
    TRACKED_FIELDS,
    build_history_entries,
    diff_tracked_fields,
    snapshot,
)
from survey_tracker.domain.records import HistoryRecord, RequestingUser, SurveyRecord
from survey_tracker.domain.staleness import as_utc, utcnow
from survey_tracker.models import Client, Contact, Survey, SurveyHistory
from survey_tracker.services.audit_service import AuditService
from survey_tracker.services.base_service import BaseService
from survey_tracker.utils.validators import require_text, sanitize_text

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "client_id",
    "system_name",
    "system_description",
    "survey_date",
    "received_date",
    "last_email_bounce_date",
    "status",
)
# Key the comment text is stored under in audit_logs.new_values.
COMMENT_KEY = "comments"
_AUDITED_FIELDS = ("client_id", *TRACKED_FIELDS, EMAIL_BOUNCE_FIELD)
_CONTACT_FIELDS = ("first_name", "last_name", "email", "phone", "role")


def _contact_value(contact: Any, name: str) -> str | None:
    if isinstance(contact, dict):
        return contact.get(name)
    return getattr(contact, name, None)


def _build_contacts(contacts: Iterable[Any]) -> list[Contact]:
    """Contacts whose fields are all blank are dropped."""
    built = []
    for contact in contacts:
        values = {name: sanitize_text(_contact_value(contact, name), max_len=320) for name in _CONTACT_FIELDS}
        if not any(values.values()):
            continue
        values["role"] = values["role"] or None
        built.append(Contact(**values))
    return built


def _clean_description(value: str | None) -> str | None:
    cleaned = sanitize_text(value)
    return cleaned or None


class SurveyService(BaseService):
    """Every entry point takes the ``RequestingUser`` the call runs for.

    Surveyors are restricted to their own surveys at query time; asking for
    someone else's survey by id is reported as not found.
    """

    def _visible_query(self, viewer: RequestingUser):
        query = self.db.query(Survey).options(joinedload(Survey.client), selectinload(Survey.contacts))
        owner = visible_owner_id(viewer)
        if owner is not None:
            query = query.filter(Survey.owner_user_id == owner)
        return query

    def list_surveys(
        self,
        viewer: RequestingUser,
        criteria: SurveyFilter | None = None,
        archived: bool = False,
    ) -> list[Survey]:
        surveys = (
            self._visible_query(viewer)
            .filter(Survey.is_archived == archived)
            .order_by(Survey.created_at.desc(), Survey.id.desc())
            .all()
        )
        return apply_filter(surveys, criteria)

    def fetch_records(
        self,
        viewer: RequestingUser,
        criteria: SurveyFilter | None = None,
        archived: bool = False,
    ) -> list[SurveyRecord]:
        return [SurveyRecord.from_model(s) for s in self.list_surveys(viewer, criteria, archived=archived)]

    def get_survey(self, viewer: RequestingUser, survey_id: int) -> Survey:
        survey = self._visible_query(viewer).filter(Survey.id == survey_id).first()
        if survey is None:
            raise NotFoundError(f"Survey not found: {survey_id}")
        return survey

    def _require_client(self, client_id: int) -> None:
        if self.db.get(Client, client_id) is None:
            raise ValidationError(f"Unknown client: {client_id}", field="client_id")

    def _apply_changes(
        self,
        survey: Survey,
        changes: dict[str, Any],
        viewer: RequestingUser,
        fields: Iterable[str] = TRACKED_FIELDS,
        touched: bool = False,
    ) -> list[SurveyHistory]:
        """Assign ``changes`` and append one history row per changed tracked field."""
        fields = tuple(fields)
        before = snapshot(survey, fields)
        for name, value in changes.items():
            if getattr(survey, name) != value:
                setattr(survey, name, value)
                touched = True
        after = snapshot(survey, fields)

        now = utcnow()
        entries = build_history_entries(survey.id, diff_tracked_fields(before, after, fields), viewer.user_id, now)
        rows = [
            SurveyHistory(
                survey_id=entry.survey_id,
                field_name=entry.field_name,
                old_value=entry.old_value,
                new_value=entry.new_value,
                user_id=entry.user_id,
                created_at=entry.created_at,
            )
            for entry in entries
        ]
        self.db.add_all(rows)
        if touched:
            current = survey.updated_at
            survey.updated_at = now if current is None else max(now, as_utc(current))
        return rows

    def create_survey(
        self,
        viewer: RequestingUser,
        client_id: int,
        system_name: str,
        survey_date: date,
        system_description: str | None = None,
        received_date: date | None = None,
        status: str | None = None,
        contacts: Iterable[Any] = (),
    ) -> Survey:
        self._require_client(client_id)
        survey = Survey(
            client_id=client_id,
            owner_user_id=viewer.user_id,
            system_name=require_text(system_name, field="system_name", max_len=255),
            system_description=_clean_description(system_description),
            survey_date=survey_date,
            received_date=received_date,
            status=(statuses.parse_status(status) if status else statuses.INITIAL_STATUS).value,
            is_archived=False,
            contacts=_build_contacts(contacts),
        )
        self.db.add(survey)
        self.flush()
        AuditService(self.db).record(
            viewer.user_id,
            AuditAction.INSERT,
            "surveys",
            survey.id,
            new_values=snapshot(survey),
        )
        self.commit()
        logger.info(
            "survey.created",
            extra=build_log_event(
                "survey.created",
                LogContext(user_id=viewer.user_id, role=viewer.role, survey_id=survey.id),
                client_id=client_id,
            ),
        )
        return self.get_survey(viewer, survey.id)

    def update_survey(
        self,
        viewer: RequestingUser,
        survey_id: int,
        changes: dict[str, Any],
        contacts: Iterable[Any] | None = None,
    ) -> Survey:
        """Edit survey fields; a given contact list replaces the stored one."""
        survey = self.get_survey(viewer, survey_id)
        cleaned: dict[str, Any] = {}
        for name, value in changes.items():
            if name not in _EDITABLE_FIELDS:
                raise ValidationError(f"Field cannot be edited: {name}", field=name)
            if name == "status":
                value = statuses.parse_status(value).value
            elif name == "system_name":
                value = require_text(value, field="system_name", max_len=255)
            elif name == "system_description":
                value = _clean_description(value)
            elif name == "client_id":
                self._require_client(value)
            elif name == "survey_date" and value is None:
                raise ValidationError("survey_date is required.", field="survey_date")
            cleaned[name] = value

        before = snapshot(survey, _AUDITED_FIELDS)
        replaced = contacts is not None
        if replaced:
            survey.contacts = _build_contacts(contacts)
        rows = self._apply_changes(
            survey,
            cleaned,
            viewer,
            fields=(*TRACKED_FIELDS, EMAIL_BOUNCE_FIELD),
            touched=replaced,
        )
        after = snapshot(survey, _AUDITED_FIELDS)
        if before != after or replaced:
            AuditService(self.db).record(
                viewer.user_id,
                AuditAction.UPDATE,
                "surveys",
                survey.id,
                old_values=before,
                new_values=after,
            )
        self.commit()
        self.db.refresh(survey)
        logger.info(
            "survey.updated",
            extra=build_log_event(
                "survey.updated",
                LogContext(user_id=viewer.user_id, role=viewer.role, survey_id=survey.id),
                changed_fields=[row.field_name for row in rows],
            ),
        )
        return survey

    def update_status(self, viewer: RequestingUser, survey_id: int, status: str) -> Survey:
        """Any status may follow any other; no transition graph is enforced."""
        new_status = statuses.parse_status(status).value
        survey = self.get_survey(viewer, survey_id)
        old_status = survey.status
        self._apply_changes(survey, {"status": new_status}, viewer)
        self.commit()
        logger.info(
            "survey.status_updated",
            extra=build_log_event(
                "survey.status_updated",
                LogContext(user_id=viewer.user_id, role=viewer.role, survey_id=survey.id),
                old_status=old_status,
                new_status=new_status,
            ),
        )
        return survey

    def mark_email_bounce(self, viewer: RequestingUser, survey_id: int, today: date | None = None) -> Survey:
        survey = self.get_survey(viewer, survey_id)
        bounce_date = today or utcnow().date()
        self._apply_changes(
            survey,
            {EMAIL_BOUNCE_FIELD: bounce_date},
            viewer,
            fields=(EMAIL_BOUNCE_FIELD,),
        )
        self.commit()
        logger.info(
            "survey.email_bounced",
            extra=build_log_event(
                "survey.email_bounced",
                LogContext(user_id=viewer.user_id, role=viewer.role, survey_id=survey.id),
                bounce_date=bounce_date.isoformat(),
            ),
        )
        return survey

    def archive(self, viewer: RequestingUser, survey_id: int) -> Survey:
        survey = self.get_survey(viewer, survey_id)
        self._apply_changes(survey, {"is_archived": True}, viewer)
        self.commit()
        logger.info(
            "survey.archived",
            extra=build_log_event(
                "survey.archived", LogContext(user_id=viewer.user_id, role=viewer.role, survey_id=survey.id)
            ),
        )
        return survey

    def restore(self, viewer: RequestingUser, survey_id: int) -> Survey:
        survey = self.get_survey(viewer, survey_id)
        if not survey.is_archived:
            raise ValidationError("Only archived surveys can be restored.", field="is_archived")
        self._apply_changes(survey, {"is_archived": False}, viewer)
        self.commit()
        logger.info(
            "survey.restored",
            extra=build_log_event(
                "survey.restored", LogContext(user_id=viewer.user_id, role=viewer.role, survey_id=survey.id)
            ),
        )
        return survey

    def delete_permanently(self, viewer: RequestingUser, survey_id: int) -> None:
        survey = self.get_survey(viewer, survey_id)
        if not survey.is_archived:
            raise ValidationError("Only archived surveys can be deleted.", field="is_archived")
        AuditService(self.db).record(
            viewer.user_id, AuditAction.DELETE, "surveys", survey.id, old_values=snapshot(survey)
        )
        self.db.delete(survey)
        self.commit()
        logger.info(
            "survey.deleted",
            extra=build_log_event(
                "survey.deleted", LogContext(user_id=viewer.user_id, role=viewer.role, survey_id=survey_id)
            ),
        )

    def add_comment(self, viewer: RequestingUser, survey_id: int, comment: str) -> None:
        survey = self.get_survey(viewer, survey_id)
        AuditService(self.db).record(
            viewer.user_id,
            AuditAction.COMMENT,
            "surveys",
            survey.id,
            new_values={COMMENT_KEY: require_text(comment, field="comment")},
        )
        self.commit()

    def history_records(self, viewer: RequestingUser, survey_ids: Iterable[int] | None = None) -> list[HistoryRecord]:
        """History rows of surveys visible to ``viewer``."""
        query = self.db.query(SurveyHistory).join(Survey, SurveyHistory.survey_id == Survey.id)
        owner = visible_owner_id(viewer)
        if owner is not None:
            query = query.filter(Survey.owner_user_id == owner)
        if survey_ids is not None:
            query = query.filter(SurveyHistory.survey_id.in_(list(survey_ids)))
        return [
            HistoryRecord(
                survey_id=row.survey_id,
                field_name=row.field_name,
                old_value=row.old_value,
                new_value=row.new_value,
                user_id=row.user_id,
                created_at=row.created_at,
            )
            for row in query.order_by(SurveyHistory.created_at.asc(), SurveyHistory.id.asc()).all()
        ]

    def merged_history(self, viewer: RequestingUser, survey_id: int) -> list[dict[str, Any]]:
        """Field changes and comments for one survey, newest first."""
        survey = self.get_survey(viewer, survey_id)
        items: list[dict[str, Any]] = [
            {
                "source": "history",
                "field_name": row.field_name,
                "old_value": row.old_value,
                "new_value": row.new_value,
                "comment": None,
                "user_id": row.user_id,
                "created_at": row.created_at,
            }
            for row in self.db.query(SurveyHistory).filter(SurveyHistory.survey_id == survey.id).all()
        ]
        for entry in AuditService(self.db).comments_for("surveys", survey.id):
            items.append(
                {
                    "source": "comment",
                    "field_name": None,
                    "old_value": None,
                    "new_value": None,
                    "comment": (entry.new_values or {}).get(COMMENT_KEY),
                    "user_id": entry.user_id,
                    "created_at": entry.created_at,
                }
            )
        items.sort(key=lambda item: as_utc(item["created_at"]), reverse=True)
        return items
