"""User profile model module."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from survey_tracker.domain.enums import Gender, UserRole
from survey_tracker.models.base import Base, TimestampMixin


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (Index("idx_users_role", "role"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, values_callable=_enum_values, length=20),
        default=UserRole.SURVEYOR,
        nullable=False,
    )
    gender: Mapped[Gender] = mapped_column(
        Enum(Gender, native_enum=False, values_callable=_enum_values, length=10),
        default=Gender.MALE,
        nullable=False,
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    password_reset_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    password_reset_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
