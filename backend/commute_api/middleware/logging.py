"""
Commute Match Backend — Request Logging Middleware
===================================================

What:  One access-log line per API request.
How:   Level follows the outcome: 5xx ERROR, 4xx WARNING, a success slower
       than settings.slow_request_ms WARNING, everything else INFO.
       /health and the docs pages are not logged.

Log Line:
    GET /api/journeys/stats 200 12.4ms [3f9a1c2b] from 10.0.0.7

Privacy:
    Bodies, query strings and the Authorization header are never logged;
    they carry passwords, bearer tokens and message search terms.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from commute_api.config import settings
from commute_api.middleware.request_id import request_id_var

logger = logging.getLogger("commute_api.access")

_UNLOGGED_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def _level_for(status: int, duration_ms: float) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400 or duration_ms > settings.slow_request_ms:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        peer = request.client.host if request.client else "unknown"
        logger.log(
            _level_for(response.status_code, elapsed_ms),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            rid,
            peer,
            extra={
                "request_id": rid,
                "method": request.method,
                "route": request.url.path,
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
            },
        )
        return response
