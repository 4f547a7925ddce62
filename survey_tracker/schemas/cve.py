"""CVE reference link schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CVECategoryCreateRequest(BaseModel):
    display_name: str = Field(min_length=1, max_length=255)
    name: str | None = Field(default=None, max_length=120)
    description: str | None = Field(default=None, max_length=2000)


class CVECategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    display_name: str
    description: str | None = None


class CVESystemCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    url: str = Field(min_length=1, max_length=2048)
    category_id: int


class CVESystemUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    url: str | None = Field(default=None, min_length=1, max_length=2048)
    category_id: int | None = None


class CVESystemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    url: str
    category_id: int
