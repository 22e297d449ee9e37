"""Error Handlers — global exception handlers for the TaskVault API.

Invariants:
    - Every handler renders through core/error_mapping.map_error (single choke point)
    - RequestValidationError → ValidationFailedError with field-level details (400)
    - Starlette HTTPException (unknown route, bad method) keeps its status, gets the envelope
    - Exception (catch-all) → logged with traceback, generic 500, never leaks internals

Design Decisions:
    - Four-layer handler: domain (TaskVaultError), validation (Pydantic),
      routing (HTTPException), catch-all (Exception)
    - 4xx logged at INFO/WARNING, 5xx at ERROR: client mistakes are not incidents
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskvault.core.error_mapping import MappedError, map_error
from taskvault.core.errors import (
    ErrorCategory, ErrorSeverity, TaskVaultError, ValidationFailedError,
)

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    404: "RESOURCE_NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _render(mapped: MappedError, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=mapped.status, content=mapped.to_response(), headers=headers,
    )


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(TaskVaultError)
    async def domain_error_handler(request: Request, exc: TaskVaultError):
        """Handle all TaskVault domain/infrastructure errors."""
        mapped = map_error(exc)
        extra = {"error_code": exc.code, "path": request.url.path}
        if mapped.status >= 500:
            logger.error(f"TaskVaultError: {exc.message}", extra=extra)
        else:
            logger.info(f"Request rejected: {exc.code}", extra=extra)
        headers = None
        if mapped.status == 401:
            headers = {"WWW-Authenticate": "Bearer"}
        return _render(mapped, headers)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors as VALIDATION_ERROR."""
        logger.warning(
            f"Validation error on {request.url.path}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return _render(map_error(_to_validation_failed(exc)))


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Give framework-level HTTP errors the same envelope."""
        code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
        mapped = MappedError(
            status=exc.status_code,
            code=code,
            message=str(exc.detail),
            category=ErrorCategory.VALIDATION.value,
            severity=ErrorSeverity.WARNING.value,
        )
        return _render(mapped, getattr(exc, "headers", None))


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return _render(map_error(exc))


def _to_validation_failed(exc: RequestValidationError) -> ValidationFailedError:
    """Build a ValidationFailedError carrying field-level details."""
    return ValidationFailedError(
        "Invalid request data",
        details={
            "fields": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    )
