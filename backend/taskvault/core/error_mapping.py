"""Error Mapping — pure translation from failure kinds to wire-level triples.

Invariants:
    - map_error is total: every exception maps to some MappedError
    - Unexposed errors (DatabaseError, unknown exceptions) map to the generic 500 shape;
      their message never reaches the client
    - No IO, no logging — the API layer logs before rendering

Design Decisions:
    - Pure function separate from FastAPI handlers: testable without an app
      (ADR: core never imports from shell)
"""

from dataclasses import dataclass
from typing import Any

from taskvault.core.errors import ErrorCategory, ErrorSeverity, TaskVaultError

INTERNAL_ERROR_CODE = "INTERNAL_ERROR"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


@dataclass(frozen=True)
class MappedError:
    """Stable (status, code, message) triple plus optional client-safe details."""
    status: int
    code: str
    message: str
    category: str
    severity: str
    details: dict[str, Any] | None = None

    def to_response(self) -> dict:
        body: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "category": self.category,
            "severity": self.severity,
        }
        if self.details:
            body["details"] = self.details
        return {"error": body}


_INTERNAL = MappedError(
    status=500,
    code=INTERNAL_ERROR_CODE,
    message=INTERNAL_ERROR_MESSAGE,
    category=ErrorCategory.INTERNAL.value,
    severity=ErrorSeverity.CRITICAL.value,
)


def map_error(exc: BaseException) -> MappedError:
    """Map any exception to the triple the client will see."""
    if isinstance(exc, TaskVaultError) and exc.expose:
        return MappedError(
            status=exc.http_status,
            code=exc.code,
            message=exc.message,
            category=exc.category.value,
            severity=exc.severity.value,
            details=exc.details,
        )
    return _INTERNAL
