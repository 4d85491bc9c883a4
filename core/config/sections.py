# =============================================================================
# core/config/sections.py - Server, Database, Logging and Secrets Sections
# =============================================================================
# Each section owns its defaults; a value missing from every source keeps the
# default below.
# =============================================================================

from dataclasses import dataclass
from typing import ClassVar

from pydantic import NonNegativeInt

from app.exceptions import InvalidValueError

from .section import ConfigSection

LOG_LEVELS = ("trace", "debug", "info", "warn", "warning", "error")
LOG_FORMATS = ("pretty", "json", "compact")


@dataclass
class ServerConfig(ConfigSection):
    """HTTP listener settings."""

    name: ClassVar[str] = "server"

    host: str = "127.0.0.1"
    port: NonNegativeInt = 3000
    # Seconds in-flight requests get to finish on shutdown
    timeout: NonNegativeInt = 30

    def validate(self) -> None:
        if not 1 <= self.port <= 65535:
            raise InvalidValueError("server.port", self.port)
        if self.timeout == 0:
            raise InvalidValueError("server.timeout", self.timeout)


@dataclass
class DatabaseConfig(ConfigSection):
    """
    Database URL and connection pool limits.

    All timeouts are in seconds. `url` normally comes from DATABASE_URL.
    """

    name: ClassVar[str] = "database"

    url: str = ""
    max_connections: NonNegativeInt = 10
    min_connections: NonNegativeInt = 5
    pool_timeout: NonNegativeInt = 30
    acquire_timeout: NonNegativeInt = 8
    idle_timeout: NonNegativeInt = 8
    max_lifetime: NonNegativeInt = 8

    def validate(self) -> None:
        if self.max_connections < 1:
            raise InvalidValueError("database.max_connections", self.max_connections)
        if self.min_connections > self.max_connections:
            raise InvalidValueError("database.min_connections", self.min_connections)


@dataclass
class LoggingConfig(ConfigSection):
    """Log level, output format and the optional rotating file sink."""

    name: ClassVar[str] = "logging"

    level: str = "info"
    format: str = "pretty"
    file_enabled: bool = False
    dir: str = "logs"
    retention_days: NonNegativeInt = 7
    cleanup_enabled: bool = False
    # Hours between cleanups; 0 cleans once at startup
    cleanup_interval: NonNegativeInt = 24

    def validate(self) -> None:
        if self.level.lower() not in LOG_LEVELS:
            raise InvalidValueError("logging.level", self.level)
        if self.format.lower() not in LOG_FORMATS:
            raise InvalidValueError("logging.format", self.format)
        if self.retention_days < 1:
            raise InvalidValueError("logging.retention_days", self.retention_days)


@dataclass
class SecretsConfig(ConfigSection):
    """Signing secret and optional cache URL, normally set from the environment."""

    name: ClassVar[str] = "secrets"

    jwt_secret: str = ""
    redis_url: str | None = None

    def validate(self) -> None:
        # Required values are checked by the loader so the error can name
        # the environment variable.
        return None

    def __repr__(self) -> str:
        masked = "***" if self.jwt_secret else ""
        return f"SecretsConfig(jwt_secret={masked!r}, redis_url={self.redis_url!r})"
