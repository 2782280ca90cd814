"""
RenderVault - Render cache for server-side component rendering

Caches the serialized output of named components keyed by their props, with
templatized attributes spliced back into cached markup on every call.
"""

__version__ = "0.1.0"
__author__ = "RenderVault Team"

from .core import CacheEntry, CacheEvent, ComponentCacheConfig
from .services import CacheAwareRenderer, CacheController, CacheState, LRUCacheStore

__all__ = [
    "CacheAwareRenderer",
    "CacheController",
    "CacheEntry",
    "CacheEvent",
    "CacheState",
    "ComponentCacheConfig",
    "LRUCacheStore",
]
