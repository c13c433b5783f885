"""
Exception handlers translating service errors into the JSON error envelope.
"""
import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from services.errors import ServiceError, ValidationFailed, validation_messages

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "N/A")


async def service_exception_handler(request: Request, exc: ServiceError):
    body = {"success": False, "message": exc.message}
    if isinstance(exc, ValidationFailed) and exc.errors:
        body["errors"] = exc.errors
    if exc.retryable:
        body["retryable"] = True
        logger.warning(f"Retryable failure on {request.url.path}: {exc.message}", extra={"request_id": _request_id(request)})
    return JSONResponse(status_code=exc.status_code, content=body)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Validation failed",
            "errors": validation_messages(exc.errors()),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", extra={"request_id": _request_id(request)})
    body = {"success": False, "message": "Something went wrong!"}
    if settings.DEBUG:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


def register_exception_handlers(app):
    app.add_exception_handler(ServiceError, service_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
