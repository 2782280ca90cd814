"""Core render cache algorithms: path codec, cache keys and templates."""

from .cache_key import build_key
from .models import CacheEntry, CacheEvent, ComponentCacheConfig, normalize_components
from .path_codec import MISSING, assign_path, flatten, from_flat_key, to_flat_key, unflatten
from .template import Template, compile_template, escape_text

__all__ = [
    "MISSING",
    "CacheEntry",
    "CacheEvent",
    "ComponentCacheConfig",
    "Template",
    "assign_path",
    "build_key",
    "compile_template",
    "escape_text",
    "flatten",
    "from_flat_key",
    "normalize_components",
    "to_flat_key",
    "unflatten",
]
