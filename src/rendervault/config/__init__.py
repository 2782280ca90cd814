"""RenderVault configuration package.

Usage:
    from rendervault.config import Settings, load_settings

    settings = load_settings("config/rendervault.toml")
"""

from __future__ import annotations

from rendervault.config.loader import load_settings
from rendervault.config.models import (
    CacheSettings,
    ComponentSettings,
    LoggingSettings,
    Settings,
)

__all__ = [
    "CacheSettings",
    "ComponentSettings",
    "LoggingSettings",
    "Settings",
    "load_settings",
]
