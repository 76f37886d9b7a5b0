"""
Request correlation and access logging.
"""
import time
import uuid
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags every log line of a request with its request ID (the caller's
    ``X-Request-ID`` when supplied) and writes one access line per response.
    Server errors are logged at warning level.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        start = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=getattr(request.client, "host", None),
        ):
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    "http_request_failed",
                    duration_ms=_elapsed_ms(start),
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                raise

            log = logger.warning if response.status_code >= 500 else logger.info
            log("http_request_completed", status_code=response.status_code, duration_ms=_elapsed_ms(start))

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
