"""Findings category and template model module."""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_tracker.domain.enums import RiskLevel
from survey_tracker.models.base import Base, CreatedAtMixin, TimestampMixin

_risk_enum = Enum(
    RiskLevel,
    native_enum=False,
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    length=20,
)


class FindingCategory(Base, CreatedAtMixin):
    __tablename__ = "findings_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    templates = relationship(
        "FindingTemplate", back_populates="category", cascade="all, delete-orphan"
    )


class FindingTemplate(Base, TimestampMixin):
    __tablename__ = "findings_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category_id: Mapped[int] = mapped_column(
        ForeignKey("findings_categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    test_description: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[RiskLevel] = mapped_column(_risk_enum, nullable=False)
    damage_potential: Mapped[RiskLevel] = mapped_column(_risk_enum, nullable=False)
    tech_risk_level: Mapped[RiskLevel] = mapped_column(_risk_enum, nullable=False)
    test_findings: Mapped[str] = mapped_column(Text, nullable=False)
    exposure_description: Mapped[str] = mapped_column(Text, nullable=False)
    recommendations: Mapped[str] = mapped_column(Text, nullable=False, default="")
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))

    category = relationship("FindingCategory", back_populates="templates")
