# =============================================================================
# app/routers/health.py - Health Check and Root Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers, the
# root greeting and the favicon.
# =============================================================================

import logging
from pathlib import Path

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse
from pydantic import BaseModel

from app.dependencies import AppStateDep
from app.exceptions import AppError
from core.response import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"
FAVICON_PATH = ASSETS_DIR / "favicon.png"


# =============================================================================
# Response Models
# =============================================================================

class HealthData(BaseModel):
    """Basic health check payload."""
    status: str


class ChecksData(BaseModel):
    """Individual dependency checks."""
    database: str
    cache: str


class ReadinessData(BaseModel):
    """Readiness check payload."""
    status: str
    checks: ChecksData


class GreetingData(BaseModel):
    message: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=ApiResponse[HealthData], tags=["Health"])
async def health_check() -> ApiResponse:
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    logger.debug("Health check request")
    return ApiResponse.success(HealthData(status="healthy"))


@router.get("/health/ready", response_model=ApiResponse[ReadinessData], tags=["Health"])
async def readiness_check(state: AppStateDep) -> ApiResponse:
    """
    Readiness check endpoint.

    Checks database and (when configured) cache connectivity.
    """
    checks = ChecksData(database="unknown", cache="disabled")

    try:
        await run_in_threadpool(state.check_database)
        checks.database = "healthy"
    except AppError as e:
        checks.database = f"unhealthy: {e.message[:50]}"

    if state.redis is not None:
        try:
            await state.check_cache()
            checks.cache = "healthy"
        except AppError as e:
            checks.cache = f"unhealthy: {e.message[:50]}"

    all_healthy = checks.database == "healthy" and checks.cache in ("healthy", "disabled")

    return ApiResponse.success(
        ReadinessData(status="ready" if all_healthy else "degraded", checks=checks)
    )


@router.get("/", response_model=ApiResponse[GreetingData], tags=["Root"])
async def hello_world() -> ApiResponse:
    """Root endpoint, answers with a greeting."""
    logger.debug("Hello World request")
    return ApiResponse.success(GreetingData(message="Hello, World!"))


@router.get("/favicon.ico", include_in_schema=False)
async def favicon() -> FileResponse:
    return FileResponse(FAVICON_PATH, media_type="image/x-icon")
