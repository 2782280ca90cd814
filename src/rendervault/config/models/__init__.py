"""Configuration domain models."""

from __future__ import annotations

from .app_settings import LoggingSettings
from .cache_settings import CacheSettings, ComponentSettings
from .settings import Settings

__all__ = [
    "CacheSettings",
    "ComponentSettings",
    "LoggingSettings",
    "Settings",
]
