"""Shared type aliases for RenderVault."""

from .cache import (
    AttributePath,
    CacheKey,
    CacheKeyGen,
    EventCallback,
    FlatKey,
    Props,
    RenderFn,
)

__all__ = [
    "AttributePath",
    "CacheKey",
    "CacheKeyGen",
    "EventCallback",
    "FlatKey",
    "Props",
    "RenderFn",
]
