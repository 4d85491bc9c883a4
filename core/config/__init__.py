# =============================================================================
# core/config/ - Layered Configuration
# =============================================================================
# - section.py: ConfigSection base class (lenient merge + validate)
# - sections.py: server, database, logging and secrets sections
# - cors.py: CORS policy section
# - model.py: AppConfig, the resolved configuration
# - loader.py: ConfigLoader, defaults -> file -> APP_* env -> secret env
# =============================================================================

from .cors import CorsConfig
from .loader import ConfigLoader, SecretOverrides
from .model import AppConfig
from .section import ConfigSection
from .sections import DatabaseConfig, LoggingConfig, SecretsConfig, ServerConfig

__all__ = [
    "AppConfig",
    "ConfigLoader",
    "ConfigSection",
    "CorsConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "SecretOverrides",
    "SecretsConfig",
    "ServerConfig",
]
