"""
Error Taxonomy

Every failure a handler reports on purpose is one of these HTTPException
subclasses. Each carries a fixed status code, so route code only chooses the
kind of failure and the human-readable message.

Anything else that escapes a handler is an unexpected failure: it is logged
and replaced by InternalError, so no internal detail reaches the client.
"""

from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, headers: dict | None = None):
        super().__init__(status_code=self.status_code, detail=message, headers=headers)


class ValidationError(AppError):
    """Malformed input, itemized per field where possible."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid input", errors: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.errors = errors or {}


class ConflictError(AppError):
    """Username or email already in use."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """Missing or invalid session, or rejected sign-in credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class DependencyError(AppError):
    """An outside service (email delivery) failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
