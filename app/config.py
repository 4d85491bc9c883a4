# =============================================================================
# app/config.py - Application Configuration Access
# =============================================================================
# Loads the layered configuration once per process.
#
# Usage:
#   from app.config import get_config
#   config = get_config()
#   print(config.server_addr())
#
# Configuration is resolved from (later wins):
# 1. Built-in defaults
# 2. config.toml in the working directory (optional)
# 3. APP_<SECTION>_<FIELD> environment variables
# 4. DATABASE_URL, JWT_SECRET, REDIS_URL
#
# A .env file in the working directory is loaded first without overriding
# variables that are already set. The loader validates everything, so
# configuration errors surface at startup rather than at runtime.
# =============================================================================

from functools import lru_cache

from core.config import AppConfig, ConfigLoader


@lru_cache
def get_config() -> AppConfig:
    """
    Get the cached, frozen AppConfig.

    Using lru_cache ensures the file and environment are read and validated
    once, not on every access.

    Raises:
        ConfigError: if the configuration can't be resolved
    """
    return ConfigLoader().load()
