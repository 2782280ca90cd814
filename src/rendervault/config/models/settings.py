"""RenderVault Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rendervault.config.models.app_settings import LoggingSettings
from rendervault.config.models.cache_settings import CacheSettings, ComponentSettings
from rendervault.shared.constants import RenderCacheConfig

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values come from (in increasing priority) defaults, a ``.env`` file,
    ``RENDERVAULT_*`` environment variables such as
    ``RENDERVAULT_ENVIRONMENT=production`` or ``RENDERVAULT_CACHE__MAX_SIZE=1000``,
    and finally the values of a TOML file passed to ``from_toml_file``.
    """

    model_config = SettingsConfigDict(
        env_prefix="RENDERVAULT_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        env_file=".env",
        extra="ignore",
    )

    environment: str = Field(
        default=RenderCacheConfig.DEFAULT_ENVIRONMENT,
        description="Name of the environment the process runs in",
    )
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    components: dict[str, ComponentSettings] = Field(default_factory=dict)

    def caching_allowed(self) -> bool:
        """True when the current environment is one caching activates in."""
        return self.environment in self.cache.environments

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file; keys it omits fall back to the environment."""
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("w", encoding="utf-8") as f:
            toml.dump(self.model_dump(exclude_none=True), f)
        logger.debug("Settings written to %s", file_path)


__all__ = ["Settings"]
