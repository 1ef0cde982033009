"""
Custom exceptions and error handling for Golobe.

Defines application-specific exceptions with error codes. The data-access
layer returns these inside a ``Failure`` (see ``golobe.result``) rather than
raising them, so callers branch on the result instead of catching.

Usage:
    from golobe.errors import ErrorCode, UnknownEntityError

    error = UnknownEntityError('"Flight" is not a valid entity')
    error.user_message  # safe to show to end users
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Document validation errors
    TYPE_MISMATCH = "TYPE_MISMATCH"
    UNKNOWN_ENTITY = "UNKNOWN_ENTITY"
    UNEXPECTED_FIELDS = "UNEXPECTED_FIELDS"
    FIELD_VALIDATION_FAILED = "FIELD_VALIDATION_FAILED"

    # Storage errors
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"

    # Signup errors
    DUPLICATE_USER = "DUPLICATE_USER"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.TYPE_MISMATCH: "Invalid request format. Please try again.",
    ErrorCode.UNKNOWN_ENTITY: "The requested record type does not exist.",
    ErrorCode.UNEXPECTED_FIELDS: "Your request contains fields that are not allowed.",
    ErrorCode.FIELD_VALIDATION_FAILED: "Your request contains invalid information. Please check and try again.",
    ErrorCode.PERSISTENCE_FAILED: "We could not save your data. Please try again.",
    ErrorCode.DUPLICATE_USER: "User already exists",
    ErrorCode.VALIDATION_ERROR: "Your request contains invalid information. Please check and try again.",
    ErrorCode.INTERNAL_ERROR: "Something went wrong, try again",
}


class GolobeError(Exception):
    """Base exception for all Golobe errors."""

    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: ErrorCode | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class TypeMismatchError(GolobeError):
    """Entity name or record has the wrong Python type."""

    default_code = ErrorCode.TYPE_MISMATCH


class UnknownEntityError(GolobeError):
    """Entity name does not resolve to a registered schema."""

    default_code = ErrorCode.UNKNOWN_ENTITY


class UnexpectedFieldsError(GolobeError):
    """Record carries keys the entity schema does not declare."""

    default_code = ErrorCode.UNEXPECTED_FIELDS

    def __init__(self, extra_fields: list[str], allowed_fields: list[str]):
        self.extra_fields = extra_fields
        self.allowed_fields = allowed_fields
        super().__init__(
            f"The following keys are not allowed: {', '.join(extra_fields)}, "
            f"Only {', '.join(allowed_fields)} are allowed"
        )


class FieldValidationError(GolobeError):
    """A field failed the entity's own rules (presence, type, format)."""

    default_code = ErrorCode.FIELD_VALIDATION_FAILED

    def __init__(self, message: str, field_errors: dict[str, str] | None = None):
        self.field_errors = field_errors or {}
        super().__init__(message)


class PersistenceError(GolobeError):
    """The storage layer rejected a write that passed validation."""

    default_code = ErrorCode.PERSISTENCE_FAILED


class DuplicateUserError(GolobeError):
    """A user with the submitted email already exists."""

    default_code = ErrorCode.DUPLICATE_USER

    def __init__(self, email: str):
        self.field_errors = {"email": "User already exists"}
        super().__init__(f"User with email {email} already exists")


class SignupValidationError(GolobeError):
    """Signup form submission failed validation."""

    default_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = field_errors
        super().__init__(f"Signup form is invalid: {', '.join(field_errors)}")
