"""Pydantic schema package for API contracts."""

from survey_tracker.schemas.auth import CurrentUserResponse, LoginRequest, RefreshRequest, TokenClaims, TokenResponse
from survey_tracker.schemas.common import APIEnvelope
from survey_tracker.schemas.surveys import (
    ContactPayload,
    SurveyCommentRequest,
    SurveyCreateRequest,
    SurveyResponse,
    SurveyStatusUpdateRequest,
    SurveyUpdateRequest,
)

__all__ = [
    "APIEnvelope",
    "ContactPayload",
    "CurrentUserResponse",
    "LoginRequest",
    "RefreshRequest",
    "SurveyCommentRequest",
    "SurveyCreateRequest",
    "SurveyResponse",
    "SurveyStatusUpdateRequest",
    "SurveyUpdateRequest",
    "TokenClaims",
    "TokenResponse",
]
