"""
Domain error taxonomy.

Services raise these; the HTTP layer turns them into status codes and the
``{"success": false, "message": ...}`` envelope.
"""

from fastapi import status


class TalentHubError(Exception):
    """Base class for every error a core operation can fail with."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TalentHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class AuthenticationError(TalentHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class AuthorizationError(TalentHubError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class NotFoundError(TalentHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(TalentHubError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class DuplicateApplicationError(ConflictError):
    default_message = "You have already applied for this job"


class InactivePostingError(TalentHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "This job posting is no longer active"


class DeadlinePassedError(TalentHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Application deadline has passed"


class StoreError(TalentHubError):
    default_message = "Database error"
