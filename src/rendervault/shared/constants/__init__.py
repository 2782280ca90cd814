"""
RenderVault Constants Module

This module provides centralized constants for RenderVault. All magic values
are defined here to keep the cache, logging and CLI layers consistent.
"""

from .cache import EventConfig, FlatKeyConfig, RenderCacheConfig
from .cli import CLIDefaults, CLIHelp, CLIMessages
from .logging import Logging

__all__ = [
    "CLIDefaults",
    "CLIHelp",
    "CLIMessages",
    "EventConfig",
    "FlatKeyConfig",
    "Logging",
    "RenderCacheConfig",
]
