# =============================================================================
# core/state.py - Shared Application State
# =============================================================================
# AppState is built once in create_app() from the frozen AppConfig and
# stored on `app.state.ctx`. Route handlers receive it through the
# AppStateDep dependency; nothing in the request path reads globals.
#
# Services take what they need from it via FromState:
#
#   class AuthService:
#       @classmethod
#       def from_state(cls, state: AppState) -> "AuthService":
#           return cls(db=state.db)
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Protocol, TypeVar

import redis.asyncio as aioredis
from sqlalchemy.engine import Engine

from core.config import AppConfig
from lib.cache import create_cache_client, ping
from lib.database import check_connection, create_db_engine

logger = logging.getLogger(__name__)

S = TypeVar("S", covariant=True)


@dataclass(frozen=True)
class AppState:
    """Resources shared by every request. Read-only once built."""

    config: AppConfig
    db: Engine
    redis: aioredis.Redis | None = None

    @classmethod
    def init(cls, config: AppConfig) -> "AppState":
        """
        Build the connection pool and optional cache client.

        Raises:
            DatabaseError: bad URL or missing driver
            CacheError: bad Redis URL
        """
        db = create_db_engine(config.database, echo=config.debug)
        redis = create_cache_client(config.secrets.redis_url)
        return cls(config=config, db=db, redis=redis)

    @property
    def jwt_secret(self) -> str:
        return self.config.secrets.jwt_secret

    def check_database(self) -> None:
        check_connection(self.db)

    async def check_cache(self) -> None:
        if self.redis is not None:
            await ping(self.redis)

    async def close(self) -> None:
        """Release pooled connections. Called once on shutdown."""
        self.db.dispose()
        if self.redis is not None:
            await self.redis.aclose()
        logger.info("Application state closed")


class FromState(Protocol[S]):
    """Anything that can be constructed from the shared state."""

    @classmethod
    def from_state(cls, state: AppState) -> S:
        ...
