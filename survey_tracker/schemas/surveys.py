"""Survey request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ContactPayload(BaseModel):
    first_name: str = Field(default="", max_length=120)
    last_name: str = Field(default="", max_length=120)
    email: str = Field(default="", max_length=320)
    phone: str = Field(default="", max_length=50)
    role: str | None = Field(default=None, max_length=120)


class ContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    role: str | None = None


class SurveyCreateRequest(BaseModel):
    client_id: int
    system_name: str = Field(min_length=1, max_length=255)
    system_description: str | None = Field(default=None, max_length=10000)
    survey_date: date
    received_date: date | None = None
    status: str | None = Field(default=None, max_length=64)
    contacts: list[ContactPayload] = Field(default_factory=list)


class SurveyUpdateRequest(BaseModel):
    client_id: int | None = None
    system_name: str | None = Field(default=None, min_length=1, max_length=255)
    system_description: str | None = Field(default=None, max_length=10000)
    survey_date: date | None = None
    received_date: date | None = None
    last_email_bounce_date: date | None = None
    status: str | None = Field(default=None, max_length=64)
    contacts: list[ContactPayload] | None = None


class SurveyStatusUpdateRequest(BaseModel):
    status: str = Field(min_length=1, max_length=64)


class SurveyCommentRequest(BaseModel):
    comment: str = Field(min_length=1, max_length=10000)


class SurveyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    client_name: str | None = None
    owner_user_id: int
    system_name: str
    system_description: str | None = None
    survey_date: date
    received_date: date | None = None
    last_email_bounce_date: date | None = None
    status: str
    status_label: str
    is_archived: bool
    days_since_update: int
    created_at: datetime
    updated_at: datetime
    contacts: list[ContactResponse] = Field(default_factory=list)


class HistoryItemResponse(BaseModel):
    source: str
    field_name: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    comment: str | None = None
    user_id: int | None = None
    created_at: datetime
