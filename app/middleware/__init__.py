# =============================================================================
# app/middleware/ - HTTP Middleware
# =============================================================================
# - request_id.py: tags every request/response with an x-request-id
# - request_logging.py: one log line per request with status and duration
# - error_handling.py: turns unhandled exceptions into a 500 envelope
# =============================================================================

from app.middleware.error_handling import ErrorHandlingMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from app.middleware.request_logging import RequestLoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "REQUEST_ID_HEADER",
    "RequestIdMiddleware",
    "RequestLoggingMiddleware",
]
