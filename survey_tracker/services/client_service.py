"""Client CRUD."""

from __future__ import annotations

import logging

from survey_tracker.core.exceptions import NotFoundError, ValidationError
from survey_tracker.core.logging import LogContext, build_log_event
from survey_tracker.domain.enums import AuditAction
from survey_tracker.domain.records import RequestingUser
from survey_tracker.models import Client
from survey_tracker.services.audit_service import AuditService
from survey_tracker.services.base_service import BaseService
from survey_tracker.utils.validators import require_text, sanitize_text, validate_http_url

logger = logging.getLogger(__name__)


class ClientService(BaseService):
    def list_clients(self) -> list[Client]:
        return self.db.query(Client).order_by(Client.name.asc()).all()

    def get_client(self, client_id: int) -> Client:
        client = self.db.get(Client, client_id)
        if client is None:
            raise NotFoundError(f"Client not found: {client_id}")
        return client

    def _ensure_unique(self, name: str, exclude_id: int | None = None) -> None:
        query = self.db.query(Client).filter(Client.name == name)
        if exclude_id is not None:
            query = query.filter(Client.id != exclude_id)
        if query.first() is not None:
            raise ValidationError(f"Client already exists: {name}", field="name")

    def create_client(self, viewer: RequestingUser, name: str, logo_url: str | None = None) -> Client:
        name = require_text(name, field="name", max_len=255)
        self._ensure_unique(name)
        client = Client(name=name, logo_url=validate_http_url(logo_url, field="logo_url") if logo_url else None)
        self.db.add(client)
        self.flush()
        AuditService(self.db).record(
            viewer.user_id, AuditAction.INSERT, "clients", client.id, new_values={"name": name}
        )
        self.commit()
        logger.info(
            "client.created",
            extra=build_log_event("client.created", LogContext(user_id=viewer.user_id), client_id=client.id),
        )
        return client

    def update_client(
        self,
        viewer: RequestingUser,
        client_id: int,
        name: str | None = None,
        logo_url: str | None = None,
    ) -> Client:
        client = self.get_client(client_id)
        old_values = {"name": client.name, "logo_url": client.logo_url}
        if name is not None:
            name = require_text(name, field="name", max_len=255)
            self._ensure_unique(name, exclude_id=client.id)
            client.name = name
        if logo_url is not None:
            logo_url = sanitize_text(logo_url)
            client.logo_url = validate_http_url(logo_url, field="logo_url") if logo_url else None
        AuditService(self.db).record(
            viewer.user_id,
            AuditAction.UPDATE,
            "clients",
            client.id,
            old_values=old_values,
            new_values={"name": client.name, "logo_url": client.logo_url},
        )
        self.commit()
        return client

    def delete_client(self, viewer: RequestingUser, client_id: int) -> None:
        """Delete a client together with its surveys, contacts and history."""
        client = self.get_client(client_id)
        AuditService(self.db).record(
            viewer.user_id, AuditAction.DELETE, "clients", client.id, old_values={"name": client.name}
        )
        self.db.delete(client)
        self.commit()
        logger.info(
            "client.deleted",
            extra=build_log_event("client.deleted", LogContext(user_id=viewer.user_id), client_id=client_id),
        )
