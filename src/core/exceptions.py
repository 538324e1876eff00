"""Custom exceptions and error codes."""

from datetime import datetime
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (422)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DISPLAY_NAME = "INVALID_DISPLAY_NAME"

    # Conflict errors (409)
    NAME_CHANGE_COOLDOWN = "NAME_CHANGE_COOLDOWN"
    PROFILE_UPDATE_CONFLICT = "PROFILE_UPDATE_CONFLICT"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORAGE_FAILURE = "STORAGE_FAILURE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class InvalidDisplayNameError(AppException):
    """Candidate display name was rejected by validation.

    ``reason`` carries the ``DisplayNameError`` value so clients can pick a
    rule-specific message.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(
            error_code=ErrorCode.INVALID_DISPLAY_NAME,
            message=f"Display name is not allowed: {reason}",
            status_code=422,
            details={"reason": reason},
        )


class NameChangeCooldownError(AppException):
    """Display name was changed too recently."""

    def __init__(self, remaining_hours: int, available_at: datetime | None = None) -> None:
        self.remaining_hours = remaining_hours
        self.available_at = available_at
        super().__init__(
            error_code=ErrorCode.NAME_CHANGE_COOLDOWN,
            message=f"Display name can be changed again in {remaining_hours} hour(s)",
            status_code=409,
            details={
                "remaining_hours": remaining_hours,
                "available_at": available_at.isoformat() if available_at else None,
            },
        )


class ProfileUpdateConflictError(AppException):
    """Profile was modified by another writer between read and write."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_UPDATE_CONFLICT,
            message="Profile was updated concurrently, please retry",
            status_code=409,
            details={"user_id": user_id},
        )


class StorageFailureError(AppException):
    """Persisting the profile failed or timed out. Safe to retry."""

    def __init__(self, message: str = "Could not save profile, please try again") -> None:
        super().__init__(
            error_code=ErrorCode.STORAGE_FAILURE,
            message=message,
            status_code=503,
            details={"retryable": True},
        )
