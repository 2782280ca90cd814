"""Render cache controller.

Routes each render call through the cache. Per call the controller moves
through these states, stopping at the first that applies:

    DISABLED  caching is off (globally, or by the environment gate)
    BYPASS    component not registered, or its key generator returned None
    HIT       an entry exists for the key; replay it
    MISS      render, store, return

DISABLED and BYPASS never touch the store and emit no event. HIT and MISS
emit exactly one CacheEvent each.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from rendervault.core.cache_key import build_key
from rendervault.core.models import (
    CacheEntry,
    CacheEvent,
    ComponentCacheConfig,
    ComponentSpec,
    normalize_components,
)
from rendervault.core.template import (
    collect_values,
    compile_template,
    restore,
    rewrite_instance_id,
    templatize,
)
from rendervault.services.events import EventSink
from rendervault.services.store import IntrospectableStore, LRUCacheStore, RenderCacheStore
from rendervault.shared.constants import EventConfig, RenderCacheConfig
from rendervault.shared.errors import create_unsupported_store_error
from rendervault.shared.logging import log_cache_event
from rendervault.shared.types import EventCallback, RenderFn

if TYPE_CHECKING:
    from rendervault.config.models.settings import Settings

logger = logging.getLogger(__name__)


class CacheState(Enum):
    """Outcome of a single render call."""

    DISABLED = "disabled"
    BYPASS = "bypass"
    HIT = "hit"
    MISS = "miss"


class CacheController:
    """Orchestrates key building, store lookups and templatization.

    Args:
        components: Component name to cache configuration. Entries may be a
            ComponentCacheConfig, a bare key generator, or a mapping with
            ``cache_key_gen`` / ``template_attrs`` / ``cache_attrs``.
        enabled: Initial value of the runtime switch (see ``enable``).
        store: Store to use; defaults to an LRUCacheStore.
        event_callback: Observer for hit/miss events.
        collect_load_time_stats: Measure render time on misses.
        instance_id_attribute: Markup attribute carrying the instance id.
        event_sink: Pre-built sink; overrides ``event_callback``.
        gated: True when the environment gate turned caching off. A gated
            controller never caches, whatever ``enable`` says.
    """

    def __init__(
        self,
        components: Optional[Mapping[str, ComponentSpec]] = None,
        *,
        enabled: bool = True,
        store: Optional[RenderCacheStore] = None,
        event_callback: Optional[EventCallback] = None,
        collect_load_time_stats: bool = False,
        instance_id_attribute: str = RenderCacheConfig.DEFAULT_INSTANCE_ID_ATTRIBUTE,
        event_sink: Optional[EventSink] = None,
        gated: bool = False,
    ) -> None:
        self._components: dict[str, ComponentCacheConfig] = normalize_components(components)
        self._store: RenderCacheStore = store if store is not None else LRUCacheStore()
        self._events = event_sink if event_sink is not None else EventSink(event_callback)
        self._enabled = enabled
        self._gated = gated
        self.collect_load_time_stats = collect_load_time_stats
        self.instance_id_attribute = instance_id_attribute

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        components: Optional[Mapping[str, ComponentSpec]] = None,
        *,
        store: Optional[RenderCacheStore] = None,
        event_callback: Optional[EventCallback] = None,
    ) -> CacheController:
        """Build a controller from Settings.

        Components declared in the settings are merged with ``components``;
        entries given in code win, since only they can carry key generators.
        The environment gate is applied here.
        """
        cache = settings.cache
        merged: dict[str, Any] = dict(settings.components)
        merged.update(components or {})

        gated = not settings.caching_allowed()
        if gated:
            logger.warning(
                RenderCacheConfig.GATE_DISABLED_MESSAGE,
                extra={"operation": "environment_gate", "context": {"environment": settings.environment}},
            )

        return cls(
            merged,
            enabled=cache.enabled,
            store=store if store is not None else LRUCacheStore(cache.max_size, cache.max_age),
            event_callback=event_callback,
            collect_load_time_stats=cache.collect_load_time_stats,
            instance_id_attribute=cache.instance_id_attribute,
            gated=gated,
        )

    # ------------------------------------------------------------------ state

    @property
    def enabled(self) -> bool:
        """True when render calls actually go through the cache."""
        return self._enabled and not self._gated

    @property
    def gated(self) -> bool:
        return self._gated

    @property
    def store(self) -> RenderCacheStore:
        return self._store

    @property
    def components(self) -> Mapping[str, ComponentCacheConfig]:
        return dict(self._components)

    def enable(self, flag: bool = True) -> None:
        """Turn caching on or off at runtime."""
        self._enabled = bool(flag)

    def is_cached_component(self, component_name: str) -> bool:
        return component_name in self._components

    # ------------------------------------------------------------ render path

    def handle(
        self,
        component_name: str,
        props: Any,
        render_fn: RenderFn,
        instance_id: Optional[str] = None,
    ) -> str:
        """Render ``component_name`` with ``props``, through the cache.

        Args:
            component_name: Declared name of the component.
            props: Props tree for this call.
            render_fn: Host renderer, called with a props tree.
            instance_id: Identifier the host assigned to this call; cached
                markup is rewritten to carry it.

        Returns:
            Serialized output for this call.
        """
        output, _ = self.handle_with_state(component_name, props, render_fn, instance_id)
        return output

    def handle_with_state(
        self,
        component_name: str,
        props: Any,
        render_fn: RenderFn,
        instance_id: Optional[str] = None,
    ) -> tuple[str, CacheState]:
        """Same as ``handle`` but also reports which state the call took."""
        if not self.enabled:
            return render_fn(props), CacheState.DISABLED

        config = self._components.get(component_name)
        if config is None:
            return render_fn(props), CacheState.BYPASS

        values = collect_values(props, config.template_attrs) if config.templatized else None
        cache_key = build_key(
            component_name,
            config,
            props,
            shapes=values.shapes if values is not None else None,
        )
        if cache_key is None:
            log_cache_event(logger, "bypass", component_name)
            return render_fn(props), CacheState.BYPASS

        cached = self._store.get(cache_key)
        if cached is not None:
            self._events.emit(CacheEvent(EventConfig.KIND_HIT, component_name))
            log_cache_event(logger, EventConfig.KIND_HIT, component_name, cache_key)
            if cached.template is not None:
                markup = restore(cached.template, values.values if values is not None else {})
            else:
                markup = cached.markup
            return (
                rewrite_instance_id(markup, cached.instance_id, instance_id, self.instance_id_attribute),
                CacheState.HIT,
            )

        output = self._miss(component_name, config, cache_key, props, render_fn, instance_id, values)
        return output, CacheState.MISS

    def _miss(  # pylint: disable=too-many-arguments
        self,
        component_name: str,
        config: ComponentCacheConfig,
        cache_key: str,
        props: Any,
        render_fn: RenderFn,
        instance_id: Optional[str],
        values: Any,
    ) -> str:
        started = time.perf_counter_ns() if self.collect_load_time_stats else 0

        if values is not None:
            markup = render_fn(templatize(props, config.template_attrs))
            template = compile_template(markup, values.values.keys())
        else:
            markup = render_fn(props)
            template = None

        load_time_ns = time.perf_counter_ns() - started if self.collect_load_time_stats else None
        self._events.emit(CacheEvent(EventConfig.KIND_MISS, component_name, load_time_ns))
        log_cache_event(logger, EventConfig.KIND_MISS, component_name, cache_key, load_time_ns)

        self._store.set(cache_key, CacheEntry(markup, template, instance_id))
        return restore(template, values) if template is not None else markup

    # ------------------------------------------------------- introspection

    def _introspectable(self, operation: str) -> IntrospectableStore:
        if not isinstance(self._store, IntrospectableStore):
            raise create_unsupported_store_error(operation, self._store)
        return self._store

    def cache_length(self) -> int:
        """Number of entries currently stored."""
        return self._introspectable("size").size()

    def cache_dump(self) -> list[Any]:
        """Snapshot of stored entries."""
        return self._introspectable("dump").dump()

    def cache_reset(self) -> None:
        """Drop every stored entry."""
        self._introspectable("reset").reset()

    def flush_events(self, timeout: Optional[float] = EventConfig.DEFAULT_FLUSH_TIMEOUT) -> bool:
        """Wait for queued events to reach the observer."""
        return self._events.flush(timeout)

    def close(self) -> None:
        """Deliver outstanding events and stop the event worker."""
        self._events.close()
