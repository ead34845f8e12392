"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (403, keycloak bearer-only semantics)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Not found errors (404)
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INCOMPLETE_REGISTRATION = "INCOMPLETE_REGISTRATION"
    MISSING_FILTER_OPTIONS = "MISSING_FILTER_OPTIONS"
    INVALID_SORT = "INVALID_SORT"
    OBJECT_STORAGE_ERROR = "OBJECT_STORAGE_ERROR"

    # Conflict errors (409)
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


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
            status_code=403,
        )


class UserNotFoundError(AppException):
    """No live user record matches the identity."""

    def __init__(self, keycloak_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message=f"User with keycloak id {keycloak_id} does not exist.",
            status_code=404,
            details={"keycloak_id": keycloak_id},
        )


class UserAlreadyExistsError(AppException):
    """A live user record already exists for the identity."""

    def __init__(self, keycloak_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_ALREADY_EXISTS,
            message=f"User with keycloak id {keycloak_id} already exists.",
            status_code=409,
            details={"keycloak_id": keycloak_id},
        )


class IncompleteRegistrationError(AppException):
    """Registration payload is missing required consent fields."""

    def __init__(self, missing_fields: list[str]) -> None:
        super().__init__(
            error_code=ErrorCode.INCOMPLETE_REGISTRATION,
            message="Some required fields are missing to complete user registration",
            status_code=400,
            details={"missing_fields": missing_fields},
        )


class MissingFilterOptionsError(AppException):
    """An "other" category filter was requested without its known universe."""

    def __init__(self, parameter: str) -> None:
        super().__init__(
            error_code=ErrorCode.MISSING_FILTER_OPTIONS,
            message=f"{parameter} must be provided when filtering on 'other'.",
            status_code=400,
            details={"parameter": parameter},
        )


class InvalidSortError(AppException):
    """Sort token could not be parsed or targets an unsortable field."""

    def __init__(self, token: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_SORT,
            message=f"Invalid sort: {token}",
            status_code=400,
            details={"sort": token},
        )


class ObjectStorageError(AppException):
    """Object storage call failed."""

    def __init__(self, operation: str, key: str) -> None:
        super().__init__(
            error_code=ErrorCode.OBJECT_STORAGE_ERROR,
            message=f"Profile image {operation} failed",
            status_code=400,
            details={"key": key},
        )
