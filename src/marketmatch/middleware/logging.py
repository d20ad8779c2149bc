# src/marketmatch/middleware/logging.py

"""Request/response logging middleware for the Market Match API."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("marketmatch.api")

REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request on entry and its status and duration on exit.

    Every response carries an X-Request-ID header matching the id in the
    log lines. Event streams are logged when the stream opens; their
    duration is the time to first byte, not the lifetime of the stream.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        start_time = time.perf_counter()
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }

        logger.info(
            "[%s] %s %s",
            request_id,
            request.method,
            request.url.path,
            extra={
                **context,
                "client_ip": request.client.host if request.client else "unknown",
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "[%s] %s %s -> ERROR (%.2fms): %s",
                request_id,
                request.method,
                request.url.path,
                _elapsed_ms(start_time),
                e,
                extra={**context, "error": str(e)},
                exc_info=True,
            )
            raise

        duration_ms = _elapsed_ms(start_time)
        streaming = response.headers.get("content-type", "").startswith(
            "text/event-stream"
        )
        logger.info(
            "[%s] %s %s -> %d (%.2fms)%s",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            " stream opened" if streaming else "",
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response  # type: ignore[no-any-return]
