"""Error Hierarchy - typed, categorized exceptions for every user-service failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are scoped to the request; storage errors (500-level) are "Other"
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with MinistryError base: FastAPI global handler catches all
    - Validation errors share one base (UserValidationError) and carry the violated rule
    - StorageError groups backend failures and deadline expiry (the "Other" outcome)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from ministry.core.domain_types import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    ValidationRule,
)


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class MinistryError(Exception):
    """Base exception for all user-service errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class UserNotFoundError(MinistryError):
    """No user matches the given id or email."""
    def __init__(
        self, lookup: str, value: object, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"user with {lookup} '{value}' not found",
            "USER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.lookup = lookup
        self.value = value


class UserExistsError(MinistryError):
    """Email already belongs to another user."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            "user already exists",
            "USER_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.email = email


class UserValidationError(MinistryError):
    """Candidate user data violates a validation rule."""
    def __init__(
        self, message: str, rule: ValidationRule, field: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.rule = rule
        self.field = field

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = [
            {"field": self.field, "rule": self.rule.value, "message": self.message},
        ]
        return response


class EmptyNameError(UserValidationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "name cannot be empty", ValidationRule.EMPTY_NAME, "name", context,
        )


class NameTooLongError(UserValidationError):
    def __init__(self, length: int, context: ErrorContext | None = None):
        super().__init__(
            f"name is too long ({length} > {MAX_NAME_LENGTH} bytes)",
            ValidationRule.NAME_TOO_LONG, "name", context,
        )
        self.length = length


class EmailTooLongError(UserValidationError):
    def __init__(self, length: int, context: ErrorContext | None = None):
        super().__init__(
            f"email is too long ({length} > {MAX_EMAIL_LENGTH} bytes)",
            ValidationRule.EMAIL_TOO_LONG, "email", context,
        )
        self.length = length


class InvalidEmailError(UserValidationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "invalid email format", ValidationRule.INVALID_EMAIL, "email", context,
        )


# ─── Storage Errors (500-level) ─────────────────────────────────

class StorageError(MinistryError):
    """Backend failure surfaced to the caller as a generic failure."""


class DatabaseError(StorageError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class OperationTimeoutError(StorageError):
    """Operation deadline expired before storage calls completed."""
    def __init__(
        self, operation: str, timeout_seconds: float,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{operation} did not complete within {timeout_seconds:g}s",
            "OPERATION_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 504,
        )
        self.operation = operation
        self.timeout_seconds = timeout_seconds
