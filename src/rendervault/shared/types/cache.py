"""
Cache-related Type Definitions

This module provides type aliases shared by the path codec, key builder,
template engine and controller.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

# Note: Using simple assignment instead of TypeAlias for Python 3.9 compatibility
Props = Dict[str, Any]
AttributePath = str  # dotted path, e.g. "data.items.0.label"
FlatKey = str  # escaped, collision-safe form of an AttributePath
CacheKey = str  # "<component>:<generated key>:<shape fingerprint>"

RenderFn = Callable[[Any], str]
CacheKeyGen = Callable[[Any], Optional[str]]
EventCallback = Callable[[Any], None]
