"""
API error handlers.

Maps the application exception hierarchy onto HTTP responses with a
stable envelope: {"error": {"code", "message", "details"}}. Unknown
exceptions become a generic 500 without internal detail.

Dependencies: fastapi, spacerag.core.exceptions
System role: Error translation at the HTTP boundary
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from spacerag.core.exceptions import InternalError, SpaceRAGException
from spacerag.models.common import ErrorBody, ErrorResponse

logger = logging.getLogger(__name__)


def error_response(status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details or {}))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def handle_app_exception(request: Request, exc: SpaceRAGException) -> JSONResponse:
    # Internal diagnostics stay in logs
    details = {"retryable": exc.retryable} if isinstance(exc, InternalError) else exc.details
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{__name__}:handle_app_exception - {exc.code}",
        extra={
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_code": exc.code,
            "error_msg": exc.message,
        },
    )
    return error_response(exc.status_code, exc.code, exc.user_message, details)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        422,
        "validation_error",
        "Request validation failed",
        {"errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]},
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"{__name__}:handle_unexpected - Unhandled exception",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
        exc_info=exc,
    )
    return error_response(500, "internal_error", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SpaceRAGException, handle_app_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
