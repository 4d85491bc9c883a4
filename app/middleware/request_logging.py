# =============================================================================
# app/middleware/request_logging.py - Request Logging Middleware
# =============================================================================

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        logger.debug(
            f"request started: {request.method} {request.url.path} "
            f"HTTP/{request.scope.get('http_version', '1.1')}"
        )

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        message = f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
        return response
