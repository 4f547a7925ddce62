"""Survey, contact and survey-history model module."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_tracker.domain.enums import SurveyStatus
from survey_tracker.models.base import Base, CreatedAtMixin, TimestampMixin, utcnow


class Survey(Base, TimestampMixin):
    __tablename__ = "surveys"
    __table_args__ = (
        Index("idx_surveys_owner_archived", "owner_user_id", "is_archived"),
        Index("idx_surveys_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    owner_user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    system_name: Mapped[str] = mapped_column(String(255), nullable=False)
    system_description: Mapped[str | None] = mapped_column(Text)
    survey_date: Mapped[date] = mapped_column(Date, nullable=False)
    received_date: Mapped[date | None] = mapped_column(Date)
    last_email_bounce_date: Mapped[date | None] = mapped_column(Date)
    # Plain string so legacy values outside the catalog still load.
    status: Mapped[str] = mapped_column(String(64), default=SurveyStatus.RECEIVED.value, nullable=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    client = relationship("Client", back_populates="surveys")
    owner = relationship("User")
    contacts = relationship(
        "Contact", back_populates="survey", cascade="all, delete-orphan", order_by="Contact.id"
    )
    history = relationship(
        "SurveyHistory", back_populates="survey", cascade="all, delete-orphan", order_by="SurveyHistory.id"
    )


class Contact(Base, CreatedAtMixin):
    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    survey_id: Mapped[int] = mapped_column(ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    role: Mapped[str | None] = mapped_column(String(120))

    survey = relationship("Survey", back_populates="contacts")


class SurveyHistory(Base):
    """Append-only record of one tracked-field mutation."""

    __tablename__ = "survey_history"
    __table_args__ = (Index("idx_survey_history_survey_created", "survey_id", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    survey_id: Mapped[int] = mapped_column(ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False)
    field_name: Mapped[str] = mapped_column(String(64), nullable=False)
    old_value: Mapped[str | None] = mapped_column(Text)
    new_value: Mapped[str | None] = mapped_column(Text)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    survey = relationship("Survey", back_populates="history")
