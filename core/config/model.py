# =============================================================================
# core/config/model.py - Resolved Application Configuration
# =============================================================================
# AppConfig groups the sections. It never hard-codes per-section merge
# logic: merge/validate/freeze all iterate over sections() polymorphically.
# =============================================================================

import tomllib
from collections.abc import Iterator, Mapping
from dataclasses import FrozenInstanceError, dataclass, field
from typing import Any, ClassVar

import tomli_w

from app.exceptions import ConfigFileError

from .cors import CorsConfig
from .section import ConfigSection
from .sections import DatabaseConfig, LoggingConfig, SecretsConfig, ServerConfig


@dataclass
class AppConfig:
    """
    Typed application configuration.

    Built from defaults, merged in place by ConfigLoader, then validated and
    frozen. After freeze() it is safe to share across threads and tasks.
    """

    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    secrets: SecretsConfig = field(default_factory=SecretsConfig)
    cors: CorsConfig = field(default_factory=CorsConfig)

    _frozen: ClassVar[bool] = False

    def sections(self) -> Iterator[ConfigSection]:
        yield self.server
        yield self.database
        yield self.logging
        yield self.secrets
        yield self.cors

    def section(self, name: str) -> ConfigSection | None:
        for section in self.sections():
            if section.section_name() == name:
                return section
        return None

    # -------------------------------------------------------------------------
    # Merge / validate / freeze
    # -------------------------------------------------------------------------

    def merge(self, raw: Mapping[str, Any]) -> None:
        """Merge a parsed document ({section: {field: value}}) into every section."""
        for section in self.sections():
            section.load_from_value(raw.get(section.section_name()))

    def merge_env(self, raw: Mapping[str, Mapping[str, str]]) -> None:
        """Merge environment text grouped by section."""
        for section in self.sections():
            values = raw.get(section.section_name())
            if values:
                section.load_from_env(values)

    def validate(self) -> None:
        for section in self.sections():
            section.validate()

    def freeze(self) -> None:
        for section in self.sections():
            section.freeze()
        object.__setattr__(self, "_frozen", True)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def __setattr__(self, key: str, value: Any) -> None:
        if self._frozen:
            raise FrozenInstanceError(f"cannot assign to '{key}' of a frozen AppConfig")
        super().__setattr__(key, value)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def server_addr(self) -> str:
        """Listen address, e.g. "127.0.0.1:3000"."""
        return f"{self.server.host}:{self.server.port}"

    @property
    def debug(self) -> bool:
        return self.logging.level.lower() in ("debug", "trace")

    # -------------------------------------------------------------------------
    # File format
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {section.section_name(): section.to_dict() for section in self.sections()}

    def to_toml(self) -> str:
        return tomli_w.dumps(self.to_dict())

    @classmethod
    def from_toml(cls, text: str, source: str = "<string>") -> "AppConfig":
        """
        Parse a TOML document over the defaults.

        No required-value checks or validation run here; use ConfigLoader
        for a startup-ready config.
        """
        try:
            raw = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigFileError(source, str(e))

        config = cls()
        config.merge(raw)
        return config
