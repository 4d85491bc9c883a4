# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# User registration endpoint and service.
#
# Usage:
#   from app.auth import router
#   app.include_router(router, prefix="/v1/auth")
# =============================================================================

from app.auth.routes import router
from app.auth.service import AuthService

__all__ = [
    "router",
    "AuthService",
]
