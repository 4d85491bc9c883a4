# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Mounted under /v1/auth.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, status

from app.auth.service import AuthService
from app.dependencies import provide
from core.response import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()

AuthServiceDep = Annotated[AuthService, Depends(provide(AuthService))]


@router.post(
    "/register",
    response_model=ApiResponse[str],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
)
async def register_user(
    auth_service: AuthServiceDep,
    username: Annotated[str, Body(description="User name to register", examples=["alice"])],
) -> ApiResponse:
    """
    Register a user.

    The request body is a bare JSON string, e.g. `"alice"`.

    Returns:
        201 envelope whose data is the registered name

    Raises:
        400: if the name is blank
        422: if the body is not a JSON string
    """
    logger.info(f"User registration request: {username}")
    user = auth_service.register_user(username)
    return ApiResponse.success(user)
