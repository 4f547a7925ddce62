"""Custom exceptions for the survey tracker service."""


class SurveyTrackerError(Exception):
    """Base exception for the survey tracker service."""

    pass


class ValidationError(SurveyTrackerError):
    """Raised when input fails validation before any mutation is attempted."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(SurveyTrackerError):
    """Raised when a resource is not found."""

    pass


class BackendError(SurveyTrackerError):
    """Raised when the persistence layer rejects or fails an operation."""

    pass


class ConfigurationError(SurveyTrackerError):
    """Raised when configuration is invalid."""

    pass


class AuthenticationError(SurveyTrackerError):
    """Raised when authentication fails."""

    pass


class AuthorizationError(SurveyTrackerError):
    """Raised when an authenticated caller lacks the required role."""

    pass
