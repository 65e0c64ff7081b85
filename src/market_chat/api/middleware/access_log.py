"""Access log: one line per request with status and latency."""
from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("market_chat.access")

# Liveness and readiness checks hit these every few seconds.
QUIET_PATHS = frozenset({"/healthz", "/readyz"})


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path not in QUIET_PATHS:
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            target = request.url.path
            if request.url.query:
                target = f"{target}?{request.url.query}"
            logger.log(
                level,
                "%s %s -> %d (%.1fms)",
                request.method,
                target,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response
