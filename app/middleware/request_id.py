# =============================================================================
# app/middleware/request_id.py - Request ID Middleware
# =============================================================================
# Generates a UUID4 for every inbound request and makes it visible to:
#   - downstream handlers, as the x-request-id request header and
#     request.state.request_id
#   - log records, through core.logging.request_id_ctx
#   - the client, as the x-request-id response header
#
# A fresh id is always generated; an id sent by the client is replaced.
# =============================================================================

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging import request_id_ctx

REQUEST_ID_HEADER = "x-request-id"
_HEADER_KEY = REQUEST_ID_HEADER.encode("latin-1")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request and its response with a new request id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())

        # Replace any client-sent id in the raw ASGI headers
        headers = [(k, v) for k, v in request.scope["headers"] if k != _HEADER_KEY]
        headers.append((_HEADER_KEY, request_id.encode("latin-1")))
        request.scope["headers"] = headers
        request.state.request_id = request_id

        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
