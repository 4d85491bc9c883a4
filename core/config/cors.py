# =============================================================================
# core/config/cors.py - CORS Policy Section
# =============================================================================
# Controls which browser origins may call the API, with which methods and
# headers, and how long the browser may cache a preflight (OPTIONS) answer.
#
# Example config.toml:
#
#   [cors]
#   allow_origins = ["https://app.example.com"]
#   allow_credentials = true
#   max_age = 600
# =============================================================================

from dataclasses import dataclass, field
from typing import ClassVar

from pydantic import NonNegativeInt

from app.exceptions import InvalidConfigError

from .section import ConfigSection

WILDCARD = "*"

CREDENTIALS_WITH_WILDCARD_METHODS = (
    "Invalid CORS configuration: Cannot combine "
    "`Access-Control-Allow-Credentials: true` with `Access-Control-Allow-Methods: *`"
)


def _default_methods() -> list[str]:
    return ["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"]


def _default_headers() -> list[str]:
    return ["Authorization", "Content-Type", "Accept", "X-Request-ID"]


def _default_expose_headers() -> list[str]:
    return ["Content-Type", "X-Total-Count"]


@dataclass
class CorsConfig(ConfigSection):
    """
    Cross-origin resource sharing policy.

    Defaults are permissive on origins ("*") and closed on credentials.
    A "*" origin is fine for public APIs but should be narrowed in production.
    """

    name: ClassVar[str] = "cors"

    allow_origins: list[str] = field(default_factory=lambda: [WILDCARD])
    allow_methods: list[str] = field(default_factory=_default_methods)
    allow_headers: list[str] = field(default_factory=_default_headers)
    allow_credentials: bool = False
    expose_headers: list[str] = field(default_factory=_default_expose_headers)
    # Preflight cache duration in seconds
    max_age: NonNegativeInt = 3600

    def validate(self) -> None:
        if not self.allow_origins:
            raise InvalidConfigError("CORS allow_origins must not be empty", section=self.name)
        if not self.allow_methods:
            raise InvalidConfigError("CORS allow_methods must not be empty", section=self.name)
        if not self.allow_headers:
            raise InvalidConfigError("CORS allow_headers must not be empty", section=self.name)
        # Browsers reject credentialed responses that use wildcard methods
        if self.allow_credentials and WILDCARD in self.allow_methods:
            raise InvalidConfigError(CREDENTIALS_WITH_WILDCARD_METHODS, section=self.name)

    @property
    def allows_any_origin(self) -> bool:
        return WILDCARD in self.allow_origins

    @property
    def allows_any_method(self) -> bool:
        return WILDCARD in self.allow_methods
