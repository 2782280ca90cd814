"""Dependency Injection container for RenderVault.

This module wires the render cache services together with dependency-injector.

The container manages:
- Settings (Singleton, loaded from the environment and an optional TOML file)
- The package logger (Singleton, configured from the logging settings)
- The render cache store (Singleton, bounded by the cache settings)
- The cache controller (Singleton)
- Cache-aware renderers (Factory, one per host renderer)
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dependency_injector import containers, providers

from rendervault.config.loader import load_settings
from rendervault.core.models import ComponentSpec
from rendervault.services import CacheAwareRenderer, CacheController, LRUCacheStore
from rendervault.shared.logging import setup_structured_logger
from rendervault.shared.types import EventCallback


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for RenderVault services.

    Example:
        >>> container = Container()
        >>> container.config_path.override(providers.Object("rendervault.toml"))
        >>> controller = container.controller()
        >>> render = container.renderer(render=host.render_component)
    """

    # Configuration
    config_path = providers.Object(None)
    config = providers.Singleton(load_settings, config_path)

    # Logging, configured from the logging settings on first use
    logger = providers.Singleton(
        setup_structured_logger,
        level=providers.Callable(lambda config: config.logging.level, config=config),
        log_file=providers.Callable(lambda config: config.logging.file, config=config),
        use_rich_console=providers.Callable(lambda config: config.logging.use_rich, config=config),
        console_output=providers.Callable(lambda config: config.logging.console_output, config=config),
    )

    # Code-registered components and observer
    components = providers.Object(None)
    event_callback = providers.Object(None)

    # Store
    store = providers.Singleton(
        LRUCacheStore,
        max_size=providers.Callable(lambda config: config.cache.max_size, config=config),
        max_age=providers.Callable(lambda config: config.cache.max_age, config=config),
    )

    # Controller
    controller = providers.Singleton(
        CacheController.from_settings,
        config,
        components,
        store=store,
        event_callback=event_callback,
    )

    renderer = providers.Factory(CacheAwareRenderer, controller=controller)


def create_container(
    config_path: str | Path | None = None,
    components: Mapping[str, ComponentSpec] | None = None,
    event_callback: EventCallback | None = None,
    **overrides: Any,
) -> Container:
    """Create a container with the given configuration file and components.

    Args:
        config_path: TOML configuration file, or None for environment only.
        components: Components registered in code; they win over
            components of the same name declared in the configuration.
        event_callback: Observer for cache hit/miss events.
        **overrides: Provider overrides, e.g. ``store=MyStore()``.

    Returns:
        Configured container.
    """
    container = Container()
    container.config_path.override(providers.Object(config_path))
    container.components.override(providers.Object(components))
    container.event_callback.override(providers.Object(event_callback))
    for name, value in overrides.items():
        getattr(container, name).override(providers.Object(value))
    return container


def create_controller(
    config_path: str | Path | None = None,
    components: Mapping[str, ComponentSpec] | None = None,
    event_callback: EventCallback | None = None,
    *,
    configure_logging: bool = False,
) -> CacheController:
    """Build a CacheController from settings in one call.

    With ``configure_logging`` the package logger is also set up from the
    logging section of the settings.
    """
    container = create_container(config_path, components, event_callback)
    if configure_logging:
        container.logger()
    return container.controller()


__all__ = ["Container", "create_container", "create_controller"]
