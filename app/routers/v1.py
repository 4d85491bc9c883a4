# =============================================================================
# app/routers/v1.py - Version 1 API
# =============================================================================
# Groups the feature routers served under /v1.
# =============================================================================

from fastapi import APIRouter

from app.auth import routes as auth_routes

router = APIRouter()

router.include_router(
    auth_routes.router,
    prefix="/auth",
    tags=["Auth"]
)
