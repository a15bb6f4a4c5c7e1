"""Application error taxonomy.

Routes and services raise these; ``app.py`` turns every one of them into a
``{"error": message}`` JSON body with the matching HTTP status.
"""
from enum import Enum
from typing import Optional


class AppError(Exception):
    """Base class for errors that are reported to the caller."""

    status_code = 500
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed input; the caller can fix it and resubmit."""

    status_code = 400
    default_message = "Invalid request"


class VerificationFailure(str, Enum):
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    ALREADY_CONSUMED = "already_consumed"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    MISMATCH = "mismatch"


class VerificationError(AppError):
    """A submitted one-time code did not check out.

    Every sub-kind carries the same public message so callers cannot tell an
    unknown email from a wrong or stale code.
    """

    status_code = 400
    default_message = "Invalid or expired verification code"

    def __init__(self, reason: VerificationFailure):
        self.reason = reason
        super().__init__(self.default_message)


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Duplicate submission, full capacity, or a closed target."""

    status_code = 409
    default_message = "Conflict"


class DependencyFailure(AppError):
    """Database or mail delivery failed. The cause is logged, never returned."""

    status_code = 500
    default_message = "Service temporarily unavailable. Please try again."
