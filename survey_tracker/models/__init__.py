"""SQLAlchemy model package for the survey tracker schema."""

from survey_tracker.models.audit_log import AuditLog
from survey_tracker.models.base import Base
from survey_tracker.models.client import Client
from survey_tracker.models.cve import CVECategory, CVESystem
from survey_tracker.models.finding import FindingCategory, FindingTemplate
from survey_tracker.models.personal_note import PersonalNote
from survey_tracker.models.survey import Contact, Survey, SurveyHistory
from survey_tracker.models.system_setting import SystemSetting
from survey_tracker.models.user import User

__all__ = [
    "AuditLog",
    "Base",
    "CVECategory",
    "CVESystem",
    "Client",
    "Contact",
    "FindingCategory",
    "FindingTemplate",
    "PersonalNote",
    "Survey",
    "SurveyHistory",
    "SystemSetting",
    "User",
]
