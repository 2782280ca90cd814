"""
Cache Configuration Constants

This module provides centralized constants for the render cache: store
bounds, key composition and the templatization token syntax.
"""

# Base time units for TTL calculations
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE


class RenderCacheConfig:
    """Render cache defaults."""

    # Store bounds
    DEFAULT_MAX_SIZE = 500
    DEFAULT_MAX_AGE = 60 * BASE_MINUTE  # 1 hour, in seconds

    # Key composition
    KEY_SEPARATOR = ":"
    DEFAULT_KEY = "_defaultKey"
    SHAPE_SEPARATOR = ","
    SHAPE_LENGTH_SEPARATOR = "_"

    # Environment gate
    PRODUCTION_ENVIRONMENT = "production"
    DEFAULT_ENVIRONMENT = "development"
    GATE_DISABLED_MESSAGE = "Caching is disabled in non-production environments."

    # Host renderer instance id marker
    DEFAULT_INSTANCE_ID_ATTRIBUTE = "data-instance-id"


class FlatKeyConfig:
    """FlatKey escaping and placeholder syntax."""

    PATH_SEPARATOR = "."
    LITERAL_UNDERSCORE = "_"
    ESCAPED_UNDERSCORE = "__"
    SEGMENT_SEPARATOR = "_."

    PLACEHOLDER_PREFIX = "${"
    PLACEHOLDER_SUFFIX = "}"


class EventConfig:
    """Instrumentation event constants."""

    EVENT_TYPE = "cache"
    KIND_HIT = "hit"
    KIND_MISS = "miss"
    WORKER_THREAD_NAME = "rendervault-events"
    DEFAULT_FLUSH_TIMEOUT = 5.0
