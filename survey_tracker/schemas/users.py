"""User administration schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from survey_tracker.domain.enums import Gender, UserRole


class UserCreateRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    first_name: str = Field(min_length=1, max_length=120)
    last_name: str = Field(min_length=1, max_length=120)
    role: str = "surveyor"
    gender: str = "male"
    password: str | None = Field(default=None, min_length=8, max_length=256)


class UserUpdateRequest(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=120)
    last_name: str | None = Field(default=None, min_length=1, max_length=120)
    role: str | None = None
    gender: str | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: UserRole
    gender: Gender
    password_reset_required: bool
    created_at: datetime | None = None


class UserCreateResponse(BaseModel):
    user: UserResponse
    temp_password: str | None = None


class PasswordResetRequest(BaseModel):
    user_id: int
    email: str = Field(min_length=3, max_length=320)


class PasswordResetResponse(BaseModel):
    success: bool
    temp_password: str | None = Field(default=None, serialization_alias="tempPassword")
    error: str | None = None
