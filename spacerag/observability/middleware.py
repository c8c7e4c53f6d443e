"""
HTTP middleware: correlation binding and one access log line per request.

CorrelationMiddleware must be the outermost middleware so the access log
line and everything logged by handlers carry the request's id.
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from spacerag.observability.correlation import bind_correlation_id, reset_correlation_id
from spacerag.observability.log_utils import error_fields

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
USER_HEADER = "X-User-Id"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log with method, path, caller, status and latency."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        fields = {
            "method": request.method,
            "path": request.url.path,
            "user_id": request.headers.get(USER_HEADER) or "-",
        }
        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{__name__}:dispatch - {request.method} {request.url.path} raised",
                extra={**fields, "process_time_ms": _elapsed_ms(start), **error_fields(e)},
            )
            raise

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            f"{__name__}:dispatch - {request.method} {request.url.path} {response.status_code}",
            extra={**fields, "status_code": response.status_code, "process_time_ms": _elapsed_ms(start)},
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind X-Correlation-ID (or a new id) for the request and echo it back."""

    async def dispatch(self, request: Request, call_next):
        correlation_id, token = bind_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            reset_correlation_id(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
