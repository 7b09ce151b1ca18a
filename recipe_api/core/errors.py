"""API error taxonomy and FastAPI exception handlers rendering the response envelope."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from recipe_api.core.config import get_settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "Something went wrong"


class ApiError(Exception):
    """Base for errors that map to an HTTP status and a client-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        detail: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        self.detail = detail
        self.headers = headers
        super().__init__(message)


class ValidationError(ApiError):
    """Malformed input; the caller can correct it and retry."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(ApiError):
    """Missing, malformed, invalid, or expired credential artifact (or bad login credentials)."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(
        self,
        message: str = "Access denied. Please login to continue.",
        *,
        reason: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        # reason is for server-side diagnostics only; it never reaches the response body.
        self.reason = reason
        super().__init__(message, headers=headers)


class AuthorizationError(ApiError):
    """Authenticated, but not allowed to act on the target."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ApiError):
    """Uniqueness violation (duplicate username, email, favorite)."""

    status_code = status.HTTP_409_CONFLICT


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _expose_detail() -> bool:
    """Error detail is only surfaced to clients outside production."""
    return get_settings().APP_ENV == "dev"


def error_body(message: str, detail: str | None = None) -> dict[str, Any]:
    """Build the failure envelope: {success: false, message, error?}."""
    body: dict[str, Any] = {"success": False, "message": message}
    if detail is not None:
        body["error"] = detail
    return body


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "method": request.method, "reason": exc.detail or exc.message},
        )
        detail = exc.detail if _expose_detail() else GENERIC_ERROR_DETAIL
    else:
        detail = exc.detail if _expose_detail() else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, detail),
        headers=exc.headers,
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation error", "; ".join(problems)),
    )


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """True when the constraint that failed references a missing row rather than a duplicate."""
    # 23503 is PostgreSQL's foreign_key_violation; SQLite only reports it in the message.
    if getattr(exc.orig, "pgcode", None) == "23503":
        return True
    return "FOREIGN KEY" in str(exc.orig).upper()


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    foreign_key = is_foreign_key_violation(exc)
    logger.warning(
        "Constraint violation",
        extra={
            "path": request.url.path,
            "method": request.method,
            "constraint": "foreign_key" if foreign_key else "unique",
        },
    )
    detail = str(exc.orig) if _expose_detail() else None
    if foreign_key:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=error_body("Referenced resource not found", detail),
        )
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body("Resource already exists", detail),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "method": request.method},
    )
    detail = str(exc) if _expose_detail() else GENERIC_ERROR_DETAIL
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach envelope-rendering handlers for every error class the API produces."""
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
