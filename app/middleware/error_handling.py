# =============================================================================
# app/middleware/error_handling.py - Unhandled Error Middleware
# =============================================================================
# Last line of defence: any exception no handler converted becomes a generic
# 500 envelope instead of a dropped connection. Known AppErrors are handled
# earlier by the exception handlers registered in main.py.
# =============================================================================

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.exceptions import envelope_response
from core.response import ApiResponse, ErrorCode

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert unhandled exceptions into a 500 error envelope."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                f"Unhandled exception: {request.method} {request.url.path} "
                f"-> {type(exc).__name__}: {exc}",
                exc_info=True,
            )
            return envelope_response(
                500,
                ApiResponse.error(ErrorCode.INTERNAL, "Internal server error"),
            )
