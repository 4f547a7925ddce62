"""Findings category/template schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from survey_tracker.domain.enums import RiskLevel


class FindingCategoryCreateRequest(BaseModel):
    display_name: str = Field(min_length=1, max_length=255)
    name: str | None = Field(default=None, max_length=120)
    description: str | None = Field(default=None, max_length=2000)


class FindingCategoryUpdateRequest(BaseModel):
    display_name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)


class FindingCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    display_name: str
    description: str | None = None
    order_index: int


class ReorderRequest(BaseModel):
    moved_id: int
    target_index: int = Field(ge=0)


class ReorderResponse(BaseModel):
    ordered_ids: list[int]
    changed: dict[int, int]


class FindingTemplateCreateRequest(BaseModel):
    category_id: int
    subject: str = Field(min_length=1, max_length=500)
    test_description: str = Field(min_length=1)
    severity: str = "medium"
    damage_potential: str = "medium"
    test_findings: str = Field(min_length=1)
    exposure_description: str = Field(min_length=1)
    recommendations: str = ""


class FindingTemplateUpdateRequest(BaseModel):
    category_id: int | None = None
    subject: str | None = Field(default=None, min_length=1, max_length=500)
    test_description: str | None = Field(default=None, min_length=1)
    severity: str | None = None
    damage_potential: str | None = None
    test_findings: str | None = Field(default=None, min_length=1)
    exposure_description: str | None = Field(default=None, min_length=1)
    recommendations: str | None = None


class FindingTemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: int
    subject: str
    test_description: str
    severity: RiskLevel
    damage_potential: RiskLevel
    tech_risk_level: RiskLevel
    test_findings: str
    exposure_description: str
    recommendations: str
    order_index: int
    created_by: int | None = None
    created_at: datetime | None = None
