"""User profiles: authentication, administration and password resets."""

from __future__ import annotations

import logging
from typing import Any

from survey_tracker.core.config import get_config
from survey_tracker.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from survey_tracker.core.logging import LogContext, build_log_event
from survey_tracker.core.security import generate_temp_password, hash_password, verify_password
from survey_tracker.domain.enums import AuditAction, Gender, UserRole
from survey_tracker.domain.records import RequestingUser
from survey_tracker.models import User
from survey_tracker.models.base import utcnow
from survey_tracker.services.audit_service import AuditService
from survey_tracker.services.base_service import BaseService
from survey_tracker.utils.validators import require_text

logger = logging.getLogger(__name__)


def _parse_role(value: Any) -> UserRole:
    try:
        return UserRole(str(value).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown role: {value}", field="role") from exc


def _parse_gender(value: Any) -> Gender:
    try:
        return Gender(str(value).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown gender: {value}", field="gender") from exc


def _normalize_email(value: str) -> str:
    email = require_text(value, field="email", max_len=320).lower()
    if "@" not in email:
        raise ValidationError("Email address is malformed.", field="email")
    return email


def _require_admin(viewer: RequestingUser, action: str) -> None:
    if not viewer.is_admin:
        raise AuthorizationError(f"Only admins can {action}.")


class UserService(BaseService):
    def authenticate(self, email: str, password: str) -> User:
        user = self.db.query(User).filter(User.email == email.strip().lower()).first()
        if user is None or not user.is_active or not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid credentials.")
        return user

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    def list_users(self, viewer: RequestingUser) -> list[User]:
        if not viewer.sees_all_surveys:
            raise AuthorizationError("User list is restricted to admins and managers.")
        return self.db.query(User).order_by(User.first_name.asc(), User.last_name.asc()).all()

    def create_user(
        self,
        viewer: RequestingUser | None,
        email: str,
        first_name: str,
        last_name: str,
        role: str = UserRole.SURVEYOR.value,
        gender: str = Gender.MALE.value,
        password: str | None = None,
    ) -> tuple[User, str | None]:
        """Create a profile; without ``password`` a temporary one is generated and returned.

        ``viewer`` is ``None`` only for the bootstrap script.
        """
        if viewer is not None:
            _require_admin(viewer, "create users")
        email = _normalize_email(email)
        if self.db.query(User).filter(User.email == email).first() is not None:
            raise ValidationError(f"User already exists: {email}", field="email")

        temp_password = None
        if password is None:
            temp_password = generate_temp_password(get_config().TEMP_PASSWORD_LENGTH)
        user = User(
            email=email,
            first_name=require_text(first_name, field="first_name", max_len=120),
            last_name=require_text(last_name, field="last_name", max_len=120),
            role=_parse_role(role),
            gender=_parse_gender(gender),
            hashed_password=hash_password(password or temp_password),
            password_reset_required=temp_password is not None,
        )
        self.db.add(user)
        self.flush()
        AuditService(self.db).record(
            viewer.user_id if viewer is not None else None,
            AuditAction.INSERT,
            "users",
            user.id,
            new_values={"email": email, "role": user.role.value},
        )
        self.commit()
        logger.info(
            "user.created",
            extra=build_log_event(
                "user.created",
                LogContext(user_id=viewer.user_id if viewer is not None else None),
                created_user_id=user.id,
                role=user.role.value,
            ),
        )
        return user, temp_password

    def update_user(
        self,
        viewer: RequestingUser,
        user_id: int,
        first_name: str | None = None,
        last_name: str | None = None,
        role: str | None = None,
        gender: str | None = None,
    ) -> User:
        _require_admin(viewer, "edit users")
        user = self.get_user(user_id)
        old_values = {"first_name": user.first_name, "last_name": user.last_name, "role": user.role.value}
        if first_name is not None:
            user.first_name = require_text(first_name, field="first_name", max_len=120)
        if last_name is not None:
            user.last_name = require_text(last_name, field="last_name", max_len=120)
        if role is not None:
            user.role = _parse_role(role)
        if gender is not None:
            user.gender = _parse_gender(gender)
        AuditService(self.db).record(
            viewer.user_id,
            AuditAction.UPDATE,
            "users",
            user.id,
            old_values=old_values,
            new_values={"first_name": user.first_name, "last_name": user.last_name, "role": user.role.value},
        )
        self.commit()
        return user

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.get_user(user_id)
        if not verify_password(current_password, user.hashed_password):
            raise AuthenticationError("Invalid credentials.")
        if len(new_password) < 8:
            raise ValidationError("Password must be at least 8 characters.", field="new_password")
        user.hashed_password = hash_password(new_password)
        user.password_reset_required = False
        self.commit()

    def reset_password(self, viewer: RequestingUser, user_id: int, email: str) -> str:
        """Replace the user's password with a generated temporary one and return it.

        ``email`` is informational and only written to the log.
        """
        _require_admin(viewer, "reset passwords")
        user = self.get_user(user_id)

        temp_password = generate_temp_password(get_config().TEMP_PASSWORD_LENGTH)
        user.hashed_password = hash_password(temp_password)
        user.password_reset_required = True
        user.password_reset_at = utcnow()
        AuditService(self.db).record(
            viewer.user_id,
            AuditAction.RESET_PASSWORD,
            "users",
            user.id,
            new_values={"password_reset_required": True},
        )
        self.commit()
        logger.info(
            "auth.password_reset",
            extra=build_log_event(
                "auth.password_reset",
                LogContext(user_id=viewer.user_id, role=viewer.role),
                target_user_id=user.id,
                target_email=email,
            ),
        )
        return temp_password
