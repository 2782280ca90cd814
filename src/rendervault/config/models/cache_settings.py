"""Cache configuration models.

This module contains the render cache settings (store bounds, event
collection, environment gate) and the declarative per-component settings
that can be written in TOML.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from rendervault.shared.constants import RenderCacheConfig


class CacheSettings(BaseModel):
    """Render cache configuration.

    ``environments`` lists the environment names in which caching activates;
    the production environment is always included.
    """

    enabled: bool = Field(default=True, description="Enable caching at startup")
    max_size: int = Field(
        default=RenderCacheConfig.DEFAULT_MAX_SIZE,
        gt=0,
        description="Maximum number of cached render results",
    )
    max_age: float | None = Field(
        default=RenderCacheConfig.DEFAULT_MAX_AGE,
        gt=0,
        description="Maximum age of a cached render result in seconds; none disables expiry",
    )
    collect_load_time_stats: bool = Field(
        default=False,
        description="Report render time on cache misses",
    )
    environments: list[str] = Field(
        default_factory=lambda: [RenderCacheConfig.PRODUCTION_ENVIRONMENT],
        description="Environments in which caching activates",
    )
    instance_id_attribute: str = Field(
        default=RenderCacheConfig.DEFAULT_INSTANCE_ID_ATTRIBUTE,
        min_length=1,
        description="Markup attribute carrying the renderer instance id",
    )

    @field_validator("max_age", mode="before")
    @classmethod
    def _parse_no_expiry(cls, value: object) -> object:
        # TOML has no null, so "none" spells it in files and env vars
        if isinstance(value, str) and value.strip().lower() in {"none", "null"}:
            return None
        return value

    @field_validator("environments", mode="before")
    @classmethod
    def _wrap_single_environment(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("environments")
    @classmethod
    def _include_production(cls, value: list[str]) -> list[str]:
        if RenderCacheConfig.PRODUCTION_ENVIRONMENT not in value:
            value = [*value, RenderCacheConfig.PRODUCTION_ENVIRONMENT]
        return value


class ComponentSettings(BaseModel):
    """Declarative cache settings for one component.

    Key generators cannot be expressed in configuration files; components
    that need one are registered in code.
    """

    model_config = {"extra": "forbid"}

    cache_attrs: list[str] = Field(default_factory=list, description="Attributes forming the key")
    template_attrs: list[str] = Field(
        default_factory=list,
        description="Attributes substituted live into cached output",
    )

    @field_validator("cache_attrs", "template_attrs", mode="before")
    @classmethod
    def _wrap_single_path(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("cache_attrs", "template_attrs")
    @classmethod
    def _reject_empty_paths(cls, value: list[str]) -> list[str]:
        if any(not path for path in value):
            msg = "attribute paths must be non-empty"
            raise ValueError(msg)
        return value


__all__ = [
    "CacheSettings",
    "ComponentSettings",
]
