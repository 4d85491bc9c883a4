# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the DropBuddy API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   dropbuddy-api                                   (console script -> run())
#   uvicorn app.main:create_app --factory --reload
# =============================================================================

import asyncio
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_config
from app.cors import build_cors_options
from app.exceptions import (
    AppError,
    ConfigError,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.middleware import ErrorHandlingMiddleware, RequestIdMiddleware, RequestLoggingMiddleware
from app.routers import health, v1
from core.config import AppConfig, LoggingConfig
from core.logging import cleanup_old_logs, configure_logging
from core.state import AppState

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


async def run_log_cleanup(config: LoggingConfig) -> None:
    """One cleanup pass. Failures are logged so the periodic task keeps running."""
    try:
        await run_in_threadpool(cleanup_old_logs, config)
    except Exception as e:
        logger.error(f"Log cleanup failed: {e}", exc_info=True)


async def log_cleanup_loop(config: LoggingConfig) -> None:
    """Remove expired log files every `cleanup_interval` hours."""
    interval = config.cleanup_interval * 3600
    while True:
        await asyncio.sleep(interval)
        await run_log_cleanup(config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: verify the database, start the log cleanup task
    - Shutdown: stop background tasks, release pooled connections
    """
    state: AppState = app.state.ctx
    config = state.config

    # Startup
    logger.info(f"Starting DropBuddy API {API_VERSION}")
    logger.info(f"Server address: {config.server_addr()}")
    logger.info(f"Database pool: {config.database.max_connections} connections")
    logger.info(f"Log level: {config.logging.level}")
    logger.info(
        f"CORS: origins {config.cors.allow_origins}, credentials {config.cors.allow_credentials}"
    )

    await run_in_threadpool(state.check_database)
    if state.redis is not None:
        logger.info("Redis client configured")

    cleanup_task = None
    if config.logging.cleanup_enabled:
        if config.logging.cleanup_interval == 0:
            await run_log_cleanup(config.logging)
        else:
            cleanup_task = asyncio.create_task(log_cleanup_loop(config.logging))

    yield

    # Shutdown
    logger.info("Shutting down DropBuddy API")

    if cleanup_task:
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            pass

    await state.close()


def create_app(config: AppConfig | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: resolved configuration; when omitted it is loaded with
            get_config() and logging is initialized from it

    Raises:
        ConfigError: configuration is invalid
        DatabaseError / CacheError: connection settings are unusable
    """
    if config is None:
        config = get_config()
        configure_logging(config.logging)

    state = AppState.init(config)

    app = FastAPI(
        title="DropBuddy API",
        description="Boilerplate HTTP API: health checks and user registration.",
        version=API_VERSION,
        # Interactive docs only in debug mode
        docs_url="/docs" if config.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if config.debug else None,
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Auth",
                "description": "User registration",
            },
            {
                "name": "Health",
                "description": "API health and readiness checks",
            },
        ],
    )
    app.state.ctx = state

    # =========================================================================
    # Middleware (added innermost first)
    # =========================================================================

    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(GZipMiddleware)
    app.add_middleware(CORSMiddleware, **build_cors_options(config.cors))

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(health.router)

    app.include_router(
        v1.router,
        prefix="/v1",
    )

    if health.ASSETS_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=health.ASSETS_DIR), name="static")

    return app


def run() -> None:
    """
    Load configuration, then serve until SIGINT/SIGTERM.

    uvicorn stops accepting connections on either signal and gives in-flight
    requests `server.timeout` seconds to finish. Configuration and database
    errors exit with status 1 before any socket is bound.
    """
    try:
        config = get_config()
    except ConfigError as e:
        # Logging isn't configured yet
        logging.basicConfig(level=logging.ERROR, format="%(levelname)s %(message)s")
        logger.error(f"Failed to load configuration: {e}")
        sys.exit(1)

    configure_logging(config.logging)

    try:
        app = create_app(config)
        # Unreachable database exits with status 1 before any socket is bound
        app.state.ctx.check_database()
    except AppError as e:
        logger.error(f"Failed to initialize application: {e}")
        sys.exit(1)

    logger.info(f"Server starting at http://{config.server_addr()}")
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_config=None,
        timeout_graceful_shutdown=config.server.timeout,
    )
    logger.info("Server shut down gracefully")


if __name__ == "__main__":
    run()
