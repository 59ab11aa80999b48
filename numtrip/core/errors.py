"""Application errors and the JSON error envelope.

Every failed request answers with the same shape:

    {"error": {"code", "message", "timestamp", "path", "method"}}

Handlers are registered on the app by ``register_exception_handlers``.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code = 500
    code = "APP_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} with id {identifier} not found" if identifier else f"{resource} not found"
        super().__init__(message)


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class RateLimitError(AppError):
    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str = "Too many requests"):
        super().__init__(message)


class ExternalServiceError(AppError):
    status_code = 502
    code = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def request_path(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def build_error_body(code: str, message: str, request: Request) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "timestamp": utc_timestamp(),
            "path": request_path(request),
            "method": request.method,
        }
    }


def resolve_error(exc: Exception) -> tuple:
    """Map any exception to ``(status, code, message)``.

    - HTTP exceptions keep their status; a dict detail may carry code/message.
    - Request validation errors become 400 VALIDATION_ERROR.
    - Anything exposing an integer ``status_code`` is an application error.
    - Everything else is a 500 whose message is never leaked.
    """
    if isinstance(exc, StarletteHTTPException):
        detail = exc.detail
        if isinstance(detail, dict):
            message = str(detail.get("message", ""))
            code = detail.get("code") or "HTTP_EXCEPTION"
        else:
            message = str(detail)
            code = "HTTP_EXCEPTION"
        return exc.status_code, code, message

    if isinstance(exc, RequestValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
            parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        return 400, "VALIDATION_ERROR", "; ".join(parts) or "Validation failed"

    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        code = getattr(exc, "code", None) or "APP_ERROR"
        message = getattr(exc, "message", None) or str(exc)
        return status_code, code, message

    return 500, "INTERNAL_ERROR", "Internal server error"


def error_response(exc: Exception, request: Request) -> JSONResponse:
    status_code, code, message = resolve_error(exc)

    log_line = f"HTTP {status_code} Error: {message} [{request.method} {request_path(request)}]"
    if status_code >= 500:
        logger.error(log_line, exc_info=exc if code == "INTERNAL_ERROR" else None)
    else:
        logger.warning(log_line)

    headers = getattr(exc, "headers", None) if isinstance(exc, StarletteHTTPException) else None
    return JSONResponse(
        status_code=status_code,
        content=build_error_body(code, message, request),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(exc, request)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope handlers to the app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, app_error_handler)
    app.add_exception_handler(RequestValidationError, app_error_handler)
    app.add_exception_handler(Exception, app_error_handler)
