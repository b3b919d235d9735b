# folder_share/middleware/error_handler.py
# Structured error handling for the share API
# Every error leaves the service as {"error": "<stable message>"}

import logging
from typing import Callable

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from folder_share.utils.logger import log_exception

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error with a stable, client-facing message."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnsupportedMediaTypeError(AppError):
    """Publish body not declared as JSON."""
    status_code = 415
    default_message = "Invalid content type"


class InvalidPayloadError(AppError):
    """Publish body is not JSON or does not match the share request shape."""
    status_code = 400
    default_message = "Invalid payload structure"


class IntegrityMismatchError(AppError):
    """Submitted integrity code does not match the recomputed one."""
    status_code = 400
    default_message = "HMAC mismatch"


class RateLimitError(AppError):
    status_code = 429
    default_message = "Rate limit exceeded"


class NotFoundOrExpiredError(AppError):
    """Unknown id and expired id are reported identically."""
    status_code = 404
    default_message = "Not found or expired"


class RouteNotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class DataMissingError(AppError):
    """Metadata row exists but its payload blob does not."""
    status_code = 500
    default_message = "Data missing"


class PersistenceError(AppError):
    """Metadata or blob store call failed."""
    status_code = 500
    default_message = "Internal server error"


class ServerMisconfigurationError(AppError):
    status_code = 500
    default_message = "Server misconfiguration"


def create_error_response(message: str, status_code: int) -> JSONResponse:
    """Create a standardized JSON error response."""
    return JSONResponse(status_code=status_code, content={"error": message})


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Catches every exception the routes did not turn into a response and
    returns an opaque 500. Details only go to the logs.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        try:
            return await call_next(request)

        except AppError as e:
            logger.warning(f"AppError: {e.status_code} - {e.message}", extra={"path": request.url.path})
            return create_error_response(e.message, e.status_code)

        except Exception as e:
            log_exception(e, context=f"Unhandled error on {request.method} {request.url.path}")
            logger.error(
                f"Unhandled exception: {type(e).__name__}",
                extra={"path": request.url.path},
                exc_info=True,
            )
            return create_error_response(PersistenceError.default_message, 500)


def setup_exception_handlers(app):
    """Register exception handlers on FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"AppError: {exc.status_code} - {exc.message}", extra={"path": request.url.path})
        return create_error_response(exc.message, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and wrong methods on known paths are both "not found"
        if exc.status_code in (404, 405):
            return create_error_response(RouteNotFoundError.default_message, 404)
        return create_error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return create_error_response(InvalidPayloadError.default_message, 400)
