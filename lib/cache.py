# =============================================================================
# lib/cache.py - Optional Redis Client
# =============================================================================
# The cache is optional: the client exists only when REDIS_URL (or
# secrets.redis_url) is set. Creating it doesn't connect; redis-py opens
# connections lazily on the first command.
# =============================================================================

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.exceptions import CacheError

logger = logging.getLogger(__name__)


def create_cache_client(redis_url: str | None) -> aioredis.Redis | None:
    """
    Build an asyncio Redis client, or None when no URL is configured.

    Raises:
        CacheError: if the URL can't be parsed
    """
    if not redis_url:
        return None

    try:
        client = aioredis.from_url(redis_url)
    except ValueError as e:
        raise CacheError(f"invalid Redis URL: {e}")

    logger.info("Redis client initialized")
    return client


async def ping(client: aioredis.Redis) -> None:
    """
    Round-trip a PING.

    Raises:
        CacheError: if Redis is unreachable
    """
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        raise CacheError(str(e))
