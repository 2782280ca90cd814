"""Cache key generation for rendered components.

A cache key has three parts joined by ``:``::

    "<component name>:<generated key>:<array-shape fingerprint>"

The generated key comes from the component's key strategy (explicit
generator, attribute concatenation, or the constant default key). The shape
fingerprint records the length of every sequence found under the template
attributes: a template compiled for N slots cannot be replayed for N±k slots,
while scalar leaf values under template attributes never reach the key.

Example:
    >>> config = ComponentCacheConfig.build(template_attrs=["items"])
    >>> build_key("List", config, {"items": ["a", "b"]})
    'List:_defaultKey:items_2'
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

import orjson

from rendervault.core.path_codec import MISSING, ShapeLog, flatten, read_path
from rendervault.shared.constants import RenderCacheConfig
from rendervault.shared.types import AttributePath, CacheKey, CacheKeyGen

if TYPE_CHECKING:
    from rendervault.core.models import ComponentCacheConfig

logger = logging.getLogger(__name__)

_ORJSON_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS
_ABSENT_MARKER = "undefined"
_PART_SEPARATOR = "|"


def default_key_generator(props: Any) -> str:  # noqa: ARG001
    """Constant key: every call for the component shares one slot."""
    return RenderCacheConfig.DEFAULT_KEY


def serialize_key_part(value: Any) -> str:
    """Serialize one attribute value deterministically.

    Values are encoded as JSON with sorted keys so that equal structures
    produce equal text. Absent attributes use a marker that is not valid
    JSON, keeping them distinct from explicit ``None``.
    """
    if value is MISSING:
        return _ABSENT_MARKER
    return orjson.dumps(value, default=str, option=_ORJSON_OPTIONS).decode("utf-8")


def attribute_key_generator(attrs: Sequence[AttributePath]) -> CacheKeyGen:
    """Build a generator that concatenates the serialized ``attrs`` values."""
    paths = tuple(attrs)

    def generate(props: Any) -> str:
        return _PART_SEPARATOR.join(serialize_key_part(read_path(props, path)) for path in paths)

    return generate


def collect_shapes(props: Any, template_attrs: Iterable[AttributePath]) -> ShapeLog:
    """Flatten the template attributes only to record their sequence lengths."""
    shapes: ShapeLog = []
    for path in template_attrs:
        flatten(props, path, shapes)
    return shapes


def shape_fingerprint(shapes: ShapeLog) -> str:
    """Render ``(flat_prefix, length)`` pairs as ``prefix_length,...``."""
    return RenderCacheConfig.SHAPE_SEPARATOR.join(
        f"{prefix}{RenderCacheConfig.SHAPE_LENGTH_SEPARATOR}{length}" for prefix, length in shapes
    )


def compose_key(component_name: str, generated_key: str, shapes: ShapeLog) -> CacheKey:
    """Join the three key parts."""
    return RenderCacheConfig.KEY_SEPARATOR.join(
        (component_name, generated_key, shape_fingerprint(shapes))
    )


def generate_key(component_name: str, config: ComponentCacheConfig, props: Any) -> str | None:
    """Run the component's key strategy.

    A generator that raises is treated like one that returned None: the
    call bypasses the cache and the failure is logged.
    """
    try:
        generated = config.cache_key_gen(props)
    except Exception:  # pylint: disable=broad-exception-caught  # noqa: BLE001
        logger.warning(
            "Cache key generator for '%s' failed; bypassing cache",
            component_name,
            exc_info=True,
            extra={"operation": "generate_key", "context": {"component": component_name}},
        )
        return None
    if generated is None:
        return None
    return generated if isinstance(generated, str) else str(generated)


def build_key(
    component_name: str,
    config: ComponentCacheConfig,
    props: Any,
    shapes: ShapeLog | None = None,
) -> CacheKey | None:
    """Derive the cache key for one render call.

    Args:
        component_name: Registered component name.
        config: The component's cache configuration.
        props: Props tree of the current call.
        shapes: Sequence lengths already collected from the template
            attributes; collected here when omitted.

    Returns:
        The cache key, or None when the call is uncacheable.
    """
    generated = generate_key(component_name, config, props)
    if generated is None:
        return None
    if shapes is None:
        shapes = collect_shapes(props, config.template_attrs)
    return compose_key(component_name, generated, shapes)

