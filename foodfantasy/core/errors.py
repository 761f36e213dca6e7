"""
Error taxonomy and the handlers that turn every failure into the JSON envelope

    {"success": false, "message": ..., "code": ..., "errors": [...]}

Nothing here retries; the caller gets a status code and decides.
"""
import asyncio
import logging
from typing import Any, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

from foodfantasy.config import settings
from foodfantasy.core.constants import FIELD_MESSAGES, ErrorCode

log = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    code = ErrorCode.INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[dict]] = None):
        self.message = message or self.message
        self.errors = errors
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    code = ErrorCode.BAD_REQUEST
    message = "Bad request"


class ForbiddenError(AppError):
    status_code = 403
    code = ErrorCode.FORBIDDEN
    message = "Admin access required"


class NotFoundError(AppError):
    status_code = 404
    code = ErrorCode.NOT_FOUND

    def __init__(self, resource: str = "Resource", message: Optional[str] = None):
        super().__init__(message or f"{resource} not found")


class ConflictError(AppError):
    status_code = 409
    code = ErrorCode.DUPLICATE_ENTRY
    message = "Duplicate entry already exists"


class PaymentNotConfiguredError(AppError):
    status_code = 503
    code = ErrorCode.PAYMENT_NOT_CONFIGURED
    message = "Payment gateway is not configured"


class PaymentGatewayError(AppError):
    status_code = 500
    code = ErrorCode.PAYMENT_GATEWAY_ERROR
    message = "Payment gateway request failed"


class PushNotConfiguredError(AppError):
    status_code = 503
    code = ErrorCode.PUSH_NOT_CONFIGURED
    message = "VAPID keys not configured"


class SubscriptionExpiredError(AppError):
    status_code = 410
    code = ErrorCode.SUBSCRIPTION_EXPIRED
    message = "Subscription expired"


class StorageNotConfiguredError(AppError):
    status_code = 503
    code = ErrorCode.STORAGE_NOT_CONFIGURED
    message = "Image storage is not configured"


def error_body(
    message: str,
    code: str,
    errors: Optional[List[dict]] = None,
    detail: Optional[str] = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message, "code": code}
    if errors is not None:
        body["errors"] = errors
    if detail and settings.debug:
        body["error"] = detail
    return body


def field_errors(exc: RequestValidationError) -> List[dict]:
    """Flatten pydantic errors into [{field, message}], one entry per field."""
    out: List[dict] = []
    seen = set()
    for err in exc.errors():
        names = [p for p in err.get("loc", ()) if isinstance(p, str)]
        field = names[-1] if names else "body"
        if field in seen:
            continue
        seen.add(field)
        out.append({"field": field, "message": FIELD_MESSAGES.get(field, err.get("msg", "Invalid value"))})
    return out


_HTTP_CODES = {
    400: ErrorCode.BAD_REQUEST,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    409: ErrorCode.DUPLICATE_ENTRY,
}

# Raised by the driver itself when the server can't be reached (asyncpg does not go through SQLAlchemy's wrapping)
DRIVER_CONNECTION_ERRORS = (OSError, asyncio.TimeoutError)


def _http_code(status_code: int) -> str:
    if status_code in _HTTP_CODES:
        return _HTTP_CODES[status_code]
    if 400 <= status_code < 500:
        return ErrorCode.BAD_REQUEST
    return ErrorCode.INTERNAL_SERVER_ERROR


def _is_connection_error(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)):
        return True
    if isinstance(exc, DBAPIError):
        return exc.connection_invalidated or isinstance(exc.orig, DRIVER_CONNECTION_ERRORS)
    return False


def _db_unavailable(request: Request, exc: Exception) -> JSONResponse:
    log.error("database unavailable on %s %s: %r", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content=error_body(
            "Database connection error. Please try again later.",
            ErrorCode.DB_CONNECTION_ERROR,
            detail=str(exc),
        ),
    )


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.code, exc.errors))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", ErrorCode.VALIDATION_ERROR, field_errors(exc)),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), _http_code(exc.status_code)),
        headers=getattr(exc, "headers", None),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    log.warning("duplicate key on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=409,
        content=error_body("Duplicate entry already exists", ErrorCode.DUPLICATE_ENTRY, detail=str(exc.orig)),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    if _is_connection_error(exc):
        return _db_unavailable(request, exc)
    log.exception("database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body("Database error occurred", ErrorCode.DB_QUERY_ERROR, detail=str(exc)),
    )


async def connection_error_handler(request: Request, exc: Exception):
    return _db_unavailable(request, exc)


async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", ErrorCode.INTERNAL_SERVER_ERROR, detail=str(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    for exc_class in DRIVER_CONNECTION_ERRORS:
        app.add_exception_handler(exc_class, connection_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
