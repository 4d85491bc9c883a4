# =============================================================================
# lib/database.py - Database Connection Pool
# =============================================================================
# Builds the SQLAlchemy engine (and its QueuePool) from the [database]
# section. Creating the engine doesn't connect; check_connection() does.
#
# Pool mapping:
#   min_connections   -> pool_size (connections kept open)
#   max_connections   -> pool_size + max_overflow
#   acquire_timeout   -> pool_timeout (wait for a free connection)
#   idle_timeout,
#   max_lifetime      -> pool_recycle (the shorter of the two)
#   pool_timeout      -> driver connect timeout
# =============================================================================

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError

from app.exceptions import DatabaseError
from core.config import DatabaseConfig

logger = logging.getLogger(__name__)


def _connect_args(backend: str, timeout: int) -> dict:
    """Driver-specific connect timeout."""
    if backend == "sqlite":
        return {"timeout": timeout}
    if backend in ("postgresql", "mysql", "mariadb"):
        return {"connect_timeout": timeout}
    return {}


def create_db_engine(config: DatabaseConfig, echo: bool = False) -> Engine:
    """
    Create the pooled engine for `config.url`.

    Args:
        config: the [database] section
        echo: log every SQL statement (enabled for debug log levels)

    Raises:
        DatabaseError: if the URL is malformed or its driver isn't installed
    """
    try:
        url = make_url(config.url)
    except ArgumentError as e:
        raise DatabaseError(f"invalid database URL: {e}")

    backend = url.get_backend_name()
    options: dict = {
        "echo": echo,
        "future": True,
        "pool_pre_ping": True,
        "connect_args": _connect_args(backend, config.pool_timeout),
    }

    # In-memory SQLite lives in a single connection; no QueuePool there
    in_memory = backend == "sqlite" and url.database in (None, "", ":memory:")
    if not in_memory:
        options.update(
            pool_size=config.min_connections,
            max_overflow=max(config.max_connections - config.min_connections, 0),
            pool_timeout=config.acquire_timeout,
            pool_recycle=min(config.idle_timeout, config.max_lifetime),
        )

    try:
        engine = create_engine(url, **options)
    except (NoSuchModuleError, ImportError) as e:
        raise DatabaseError(f"database driver unavailable for '{backend}': {e}")

    logger.info(
        f"Database pool configured: backend={backend}, "
        f"connections={config.min_connections}..{config.max_connections}"
    )
    return engine


def check_connection(engine: Engine) -> None:
    """
    Run `SELECT 1` on a pooled connection.

    Raises:
        DatabaseError: if no connection can be acquired or the query fails
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise DatabaseError(str(e))
