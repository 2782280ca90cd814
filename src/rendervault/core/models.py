"""Render cache domain models.

ComponentCacheConfig is built once per component at configuration time and
is immutable afterwards. CacheEntry is written on a miss and replaced
wholesale by the next miss for the same key. CacheEvent is ephemeral and only
travels to the registered observer.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Optional, Union

from rendervault.core.cache_key import attribute_key_generator, default_key_generator
from rendervault.core.path_codec import check_collisions, parse_path
from rendervault.shared.constants import EventConfig
from rendervault.shared.errors import ConfigurationError, ErrorCode, ErrorContext
from rendervault.shared.types import AttributePath, CacheKeyGen

if TYPE_CHECKING:
    from rendervault.core.template import Template

# Explicitly export for mypy
__all__ = [
    "CacheEntry",
    "CacheEvent",
    "ComponentCacheConfig",
    "ComponentSpec",
    "normalize_components",
]


def _as_paths(value: Iterable[AttributePath] | AttributePath | None) -> tuple[AttributePath, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class ComponentCacheConfig:
    """Cache configuration for a single component.

    Attributes:
        cache_key_gen: Called with the full props tree; returns the generated
            key, or None to bypass the cache for that call.
        template_attrs: Attribute paths substituted live into cached output.
            Their scalar values never influence the cache key.
        cache_attrs: Attribute paths concatenated into the default key when no
            explicit generator is given.
    """

    cache_key_gen: CacheKeyGen
    template_attrs: tuple[AttributePath, ...] = ()
    cache_attrs: tuple[AttributePath, ...] = ()

    @property
    def templatized(self) -> bool:
        return bool(self.template_attrs)

    @classmethod
    def build(
        cls,
        cache_key_gen: CacheKeyGen | None = None,
        template_attrs: Iterable[AttributePath] | AttributePath | None = None,
        cache_attrs: Iterable[AttributePath] | AttributePath | None = None,
        component: str | None = None,
    ) -> ComponentCacheConfig:
        """Resolve the key strategy and validate attribute paths.

        Strategy priority: explicit generator, then concatenation over
        ``cache_attrs``, then the constant default key.

        Raises:
            ConfigurationError: If template attribute paths collide or any
                attribute path is empty.
        """
        templates = _as_paths(template_attrs)
        keys = _as_paths(cache_attrs)
        check_collisions(templates, component)
        for path in keys:
            parse_path(path)

        if cache_key_gen is None:
            cache_key_gen = attribute_key_generator(keys) if keys else default_key_generator
        elif not callable(cache_key_gen):
            raise ConfigurationError(
                ErrorCode.CONFIG_INVALID,
                "cache_key_gen must be callable",
                ErrorContext(component=component, operation="build_component_config"),
            )

        return cls(
            cache_key_gen=cache_key_gen,
            template_attrs=templates,
            cache_attrs=keys,
        )


# A component entry may be a ready config, a bare key generator, or a mapping
# with any of cache_key_gen / template_attrs / cache_attrs.
ComponentSpec = Union[ComponentCacheConfig, CacheKeyGen, Mapping[str, Any]]

_SPEC_ALIASES = {
    "cacheKeyGen": "cache_key_gen",
    "templateAttrs": "template_attrs",
    "cacheAttrs": "cache_attrs",
}


def _build_one(name: str, spec: Any) -> ComponentCacheConfig:
    if isinstance(spec, ComponentCacheConfig):
        return spec
    if callable(spec):
        return ComponentCacheConfig.build(cache_key_gen=spec, component=name)
    if isinstance(spec, Mapping):
        options = {_SPEC_ALIASES.get(key, key): value for key, value in spec.items()}
        unknown = set(options) - {"cache_key_gen", "template_attrs", "cache_attrs"}
        if unknown:
            raise ConfigurationError(
                ErrorCode.CONFIG_INVALID,
                f"Unknown cache options for '{name}': {', '.join(sorted(unknown))}",
                ErrorContext(component=name, operation="normalize_components"),
            )
        return ComponentCacheConfig.build(component=name, **options)
    if hasattr(spec, "model_dump"):
        return _build_one(name, spec.model_dump())
    raise ConfigurationError(
        ErrorCode.CONFIG_INVALID,
        f"Unsupported cache configuration for '{name}': {type(spec).__name__}",
        ErrorContext(component=name, operation="normalize_components"),
    )


def normalize_components(
    components: Mapping[str, ComponentSpec] | None,
) -> dict[str, ComponentCacheConfig]:
    """Turn user-facing component entries into ComponentCacheConfig objects."""
    if not components:
        return {}
    return {name: _build_one(name, spec) for name, spec in components.items()}


@dataclass(frozen=True)
class CacheEntry:
    """A stored render result.

    Attributes:
        markup: Output as produced by the host renderer (with placeholder
            tokens when the component is templatized).
        template: Compiled template, present only for templatized components.
        instance_id: Instance identifier the markup was rendered with.
    """

    markup: str
    template: Optional[Template] = None
    instance_id: Optional[str] = None


@dataclass(frozen=True)
class CacheEvent:
    """Hit/miss notification delivered to the observer."""

    kind: Literal["hit", "miss"]
    component_name: str
    load_time_ns: Optional[int] = None
    type: str = field(default=EventConfig.EVENT_TYPE)

    @property
    def is_hit(self) -> bool:
        return self.kind == EventConfig.KIND_HIT
