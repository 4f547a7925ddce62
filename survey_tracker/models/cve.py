"""CVE reference category and system model module."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_tracker.models.base import Base, CreatedAtMixin, TimestampMixin


class CVECategory(Base, CreatedAtMixin):
    __tablename__ = "cve_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    systems = relationship("CVESystem", back_populates="category", cascade="all, delete-orphan")


class CVESystem(Base, TimestampMixin):
    __tablename__ = "cve_systems"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    category_id: Mapped[int] = mapped_column(
        ForeignKey("cve_categories.id", ondelete="CASCADE"), nullable=False, index=True
    )

    category = relationship("CVECategory", back_populates="systems")
