# =============================================================================
# app/routers/not_found.py - Catch-all 404 Page
# =============================================================================
# Unmatched paths get a small HTML page instead of a JSON envelope, showing
# the requested path, the time and the request id for support tickets.
# =============================================================================

import html
import logging
from datetime import datetime, timezone

from fastapi import Request
from fastapi.responses import HTMLResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>404 Not Found</title>
</head>
<body>
  <main>
    <h1>404</h1>
    <p>The page you are looking for does not exist.</p>
    <dl>
      <dt>Path</dt><dd><code>{path}</code></dd>
      <dt>Time</dt><dd>{timestamp}</dd>{request_id_row}
    </dl>
    <p><a href="/">Back to home</a></p>
  </main>
</body>
</html>
"""


def not_found_page(path: str, request_id: str | None = None, timestamp: str | None = None) -> str:
    """Render the 404 page. All values are HTML-escaped."""
    if timestamp is None:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    request_id_row = ""
    if request_id:
        request_id_row = f"\n      <dt>Request ID</dt><dd><code>{html.escape(request_id)}</code></dd>"

    return _PAGE.format(
        path=html.escape(path),
        timestamp=html.escape(timestamp),
        request_id_row=request_id_row,
    )


def render_not_found(request: Request) -> HTMLResponse:
    """404 handler for any path no route matched."""
    request_id = request.headers.get(REQUEST_ID_HEADER)
    if request_id:
        logger.debug(f"404 page rendering with request-id: {request_id}")
    else:
        logger.debug(f"404 page rendering without request-id, headers: {list(request.headers.keys())}")

    return HTMLResponse(
        content=not_found_page(request.url.path, request_id),
        status_code=404,
    )
