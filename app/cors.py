# =============================================================================
# app/cors.py - CORS Middleware Options
# =============================================================================
# Translates the [cors] section into keyword arguments for Starlette's
# CORSMiddleware.
# =============================================================================

import logging
from typing import Any

from app.exceptions import InvalidConfigError
from core.config import CorsConfig
from core.config.cors import CREDENTIALS_WITH_WILDCARD_METHODS, WILDCARD

logger = logging.getLogger(__name__)

# Tokens Starlette accepts as HTTP methods
_KNOWN_METHODS = {"GET", "HEAD", "POST", "PUT", "DELETE", "CONNECT", "OPTIONS", "TRACE", "PATCH"}


def build_cors_options(cors: CorsConfig) -> dict[str, Any]:
    """
    Build CORSMiddleware kwargs from the CORS section.

    Unknown method names are dropped with a warning; "*" in origins or
    methods means any.

    Raises:
        InvalidConfigError: credentials combined with wildcard methods
    """
    if cors.allow_credentials and cors.allows_any_method:
        raise InvalidConfigError(CREDENTIALS_WITH_WILDCARD_METHODS, section=cors.name)

    if cors.allows_any_method:
        methods = [WILDCARD]
    else:
        methods = []
        for method in cors.allow_methods:
            upper = method.strip().upper()
            if upper in _KNOWN_METHODS:
                methods.append(upper)
            else:
                logger.warning(f"Ignoring unknown CORS method: {method!r}")

    origins = [WILDCARD] if cors.allows_any_origin else list(cors.allow_origins)

    return {
        "allow_origins": origins,
        "allow_methods": methods,
        "allow_headers": list(cors.allow_headers),
        "allow_credentials": cors.allow_credentials,
        "expose_headers": list(cors.expose_headers),
        "max_age": cors.max_age,
    }
