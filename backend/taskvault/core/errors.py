"""Error Hierarchy — typed, categorized exceptions for all TaskVault failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - Unauthenticated errors share status 401 but keep distinct codes so clients can
      tell "log in again" (TOKEN_EXPIRED) apart from "bad request" (TOKEN_MALFORMED)
    - `expose=False` errors never reach the wire with their own message

Design Decisions:
    - Single hierarchy with TaskVaultError base: one FastAPI handler catches all (ADR: uniform error shape)
    - NotFound is used for both "absent" and "owned by someone else" (ADR: no existence oracle)
    - InvalidCredentialError has one fixed message for unknown email and wrong password
"""

from datetime import datetime
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    CONFIGURATION = "configuration"
    DATABASE = "database"
    INTERNAL = "internal"


class TaskVaultError(Exception):
    """Base exception for all TaskVault errors."""

    expose: bool = True

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.details = details


# ─── Validation / Conflict (400, 409) ────────────────────────────

class ValidationFailedError(TaskVaultError):
    """Malformed or out-of-range input, detected before touching storage."""
    def __init__(
        self, message: str, field: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, 400, details,
        )
        self.field = field


class DuplicateResourceError(TaskVaultError):
    """Unique constraint conflict translated at the store boundary."""
    def __init__(self, message: str):
        super().__init__(
            message, "DUPLICATE_RESOURCE", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 409,
        )


# ─── Authentication (401) ────────────────────────────────────────

class UnauthenticatedError(TaskVaultError):
    """Base for every 401 failure. Sub-classes fix the code."""
    def __init__(
        self, message: str, code: str, details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, 401, details,
        )


class NoTokenError(UnauthenticatedError):
    def __init__(self):
        super().__init__("No token provided", "NO_TOKEN")


class TokenMalformedError(UnauthenticatedError):
    def __init__(self):
        super().__init__("Invalid token", "TOKEN_MALFORMED")


class TokenExpiredError(UnauthenticatedError):
    """Token signature is valid but `exp` has passed."""
    def __init__(self, expired_at: datetime):
        super().__init__(
            "Token expired", "TOKEN_EXPIRED",
            {"expired_at": expired_at.isoformat()},
        )
        self.expired_at = expired_at


class TokenNotYetValidError(UnauthenticatedError):
    """Token signature is valid but `nbf` is still in the future."""
    def __init__(self, valid_from: datetime):
        super().__init__(
            "Token not yet valid", "TOKEN_NOT_YET_VALID",
            {"valid_from": valid_from.isoformat()},
        )
        self.valid_from = valid_from


class InvalidCredentialError(UnauthenticatedError):
    """Unknown email or wrong password — deliberately indistinguishable."""
    def __init__(self):
        super().__init__("Invalid email or password", "INVALID_CREDENTIALS")


# ─── Not Found (404) ─────────────────────────────────────────────

class ResourceNotFoundError(TaskVaultError):
    """Requested resource does not exist or is not owned by the caller."""
    def __init__(self, resource_type: str):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, 404,
        )
        self.resource_type = resource_type


# ─── Infrastructure (500) ────────────────────────────────────────

class ServerMisconfigurationError(TaskVaultError):
    """Startup-time defect such as a missing signing secret."""
    def __init__(self, message: str = "Server misconfiguration"):
        super().__init__(
            message, "SERVER_MISCONFIGURATION", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, 500,
        )


class DatabaseError(TaskVaultError):
    """Database operation failed. Message is for logs only."""

    expose = False

    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, 500,
        )
        self.operation = operation
