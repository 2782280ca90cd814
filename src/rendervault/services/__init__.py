"""Render cache services: stores, event delivery and the controller."""

from .adapter import CacheAwareRenderer, resolve_component_name
from .controller import CacheController, CacheState
from .events import EventSink
from .store import IntrospectableStore, LRUCacheStore, RenderCacheStore, StoreStats

__all__ = [
    "CacheAwareRenderer",
    "CacheController",
    "CacheState",
    "EventSink",
    "IntrospectableStore",
    "LRUCacheStore",
    "RenderCacheStore",
    "StoreStats",
    "resolve_component_name",
]
