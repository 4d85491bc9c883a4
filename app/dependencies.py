# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from collections.abc import Callable
from typing import Annotated, TypeVar

from fastapi import Depends, Request

from core.state import AppState, FromState

T = TypeVar("T")


def get_app_state(request: Request) -> AppState:
    """
    Get the shared application state.

    create_app() stores it on app.state.ctx before the first request.
    """
    return request.app.state.ctx


# Type alias for dependency injection
AppStateDep = Annotated[AppState, Depends(get_app_state)]


def provide(service_cls: type[FromState[T]]) -> Callable[[AppState], T]:
    """
    Dependency that builds a service from the shared state.

    Usage:
        AuthServiceDep = Annotated[AuthService, Depends(provide(AuthService))]
    """

    def dependency(state: AppStateDep) -> T:
        return service_cls.from_state(state)

    return dependency
