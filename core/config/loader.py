# =============================================================================
# core/config/loader.py - Layered Configuration Loader
# =============================================================================
# Resolves AppConfig once at startup. Later layers override earlier ones:
#
#   1. Built-in defaults (each section's dataclass defaults)
#   2. config.toml                       - missing file is fine, bad TOML is fatal
#   3. APP_<SECTION>_<FIELD> variables   - e.g. APP_SERVER_PORT=8080
#   4. DATABASE_URL, JWT_SECRET, REDIS_URL - read directly, highest priority
#
# Then the required secrets are checked, every section validates itself and
# the result is frozen. Any failure raises a ConfigError; no partial config
# is ever returned.
#
# Usage:
#   from core.config import ConfigLoader
#   config = ConfigLoader().load()
# =============================================================================

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.exceptions import ConfigFileError, MissingVarError

from .model import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_ENV_PREFIX = "APP_"
DEFAULT_ENV_FILE = ".env"


class SecretOverrides(BaseSettings):
    """
    Secret environment variables applied after every other layer.

    A variable that is set wins even when empty, so DATABASE_URL="" still
    fails the required check instead of silently using the file value.
    """

    DATABASE_URL: str | None = Field(default=None, description="Database connection URL")
    JWT_SECRET: str | None = Field(default=None, description="Token signing secret")
    REDIS_URL: str | None = Field(default=None, description="Redis connection URL")

    model_config = SettingsConfigDict(
        # .env is loaded into os.environ by the loader itself
        env_file=None,
        case_sensitive=True,
        extra="ignore",
    )


class ConfigLoader:
    """
    Builds a validated, frozen AppConfig from defaults, file and environment.

    Args:
        config_file: TOML file path; relative paths resolve against the cwd
        env_prefix: prefix for general overrides
        env_file: dotenv file loaded first without overriding set variables;
            None skips it
    """

    def __init__(
        self,
        config_file: str | Path = DEFAULT_CONFIG_FILE,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        env_file: str | Path | None = DEFAULT_ENV_FILE,
    ):
        self.config_file = Path(config_file)
        self.env_prefix = env_prefix
        self.env_file = Path(env_file) if env_file is not None else None

    def load(self) -> AppConfig:
        """
        Resolve the configuration.

        Returns:
            AppConfig: validated and frozen

        Raises:
            ConfigFileError: config file exists but can't be read or parsed
            MissingVarError: DATABASE_URL or JWT_SECRET resolved to empty
            InvalidConfigError / InvalidValueError: a section failed validation
        """
        if self.env_file is not None and self.env_file.is_file():
            load_dotenv(self.env_file, override=False)
            logger.debug(f"Loaded environment from {self.env_file}")

        config = AppConfig()
        config.merge(self.read_file())
        config.merge_env(self.read_prefixed_env(os.environ))
        self.apply_secret_overrides(config)

        self.check_required(config)
        config.validate()
        config.freeze()

        logger.debug(f"Configuration resolved, server address {config.server_addr()}")
        return config

    # -------------------------------------------------------------------------
    # Layers
    # -------------------------------------------------------------------------

    def read_file(self) -> dict:
        """Parse the TOML file, or return {} when it doesn't exist."""
        if not self.config_file.exists():
            logger.debug(f"No config file at {self.config_file}, using defaults")
            return {}

        try:
            with open(self.config_file, "rb") as f:
                return tomllib.load(f)
        except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
            raise ConfigFileError(str(self.config_file), str(e))

    def read_prefixed_env(self, environ: Mapping[str, str]) -> dict[str, dict[str, str]]:
        """
        Group APP_<SECTION>_<FIELD> variables by section.

        The first token after the prefix is the section and the rest is the
        field, so APP_DATABASE_MAX_CONNECTIONS -> database.max_connections.
        Matching is case-insensitive.
        """
        prefix = self.env_prefix.upper()
        grouped: dict[str, dict[str, str]] = {}
        for key, value in environ.items():
            if not key.upper().startswith(prefix):
                continue
            section, _, field_name = key[len(prefix):].lower().partition("_")
            if not section or not field_name:
                logger.debug(f"Ignoring {key}: expected {prefix}<SECTION>_<FIELD>")
                continue
            grouped.setdefault(section, {})[field_name] = value
        return grouped

    def apply_secret_overrides(self, config: AppConfig) -> None:
        secrets = SecretOverrides()
        if secrets.DATABASE_URL is not None:
            config.database.url = secrets.DATABASE_URL
        if secrets.JWT_SECRET is not None:
            config.secrets.jwt_secret = secrets.JWT_SECRET
        if secrets.REDIS_URL is not None:
            config.secrets.redis_url = secrets.REDIS_URL

    @staticmethod
    def check_required(config: AppConfig) -> None:
        if not config.database.url:
            raise MissingVarError("DATABASE_URL")
        if not config.secrets.jwt_secret:
            raise MissingVarError("JWT_SECRET")
