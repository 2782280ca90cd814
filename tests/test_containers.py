"""Tests for the dependency injection container."""

from __future__ import annotations

import logging
from pathlib import Path

from rendervault.containers import Container, create_container, create_controller
from rendervault.services import CacheAwareRenderer, CacheController, LRUCacheStore

CONFIG = """
environment = "production"

[cache]
max_size = 7

[components.Greeter]
template_attrs = ["text"]
"""


class TestContainer:
    """Wiring settings, store and controller."""

    def test_controller_built_from_config_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "rendervault.toml"
        config_path.write_text(CONFIG, encoding="utf-8")

        controller = create_controller(config_path)

        assert isinstance(controller, CacheController)
        assert controller.enabled
        assert controller.is_cached_component("Greeter")
        assert isinstance(controller.store, LRUCacheStore)
        assert controller.store.max_size == 7
        controller.close()

    def test_controller_and_store_are_singletons(self) -> None:
        container = Container()
        assert container.controller() is container.controller()
        assert container.controller().store is container.store()

    def test_environment_only_defaults_are_gated(self) -> None:
        controller = create_controller()
        assert controller.gated

    def test_store_override(self) -> None:
        custom = LRUCacheStore(max_size=2)
        container = create_container(store=custom)
        assert container.controller().store is custom

    def test_code_components_and_renderer_factory(self) -> None:
        container = create_container(components={"Badge": {}})
        render = container.renderer(render=lambda component, props, instance_id: "<b></b>")

        assert isinstance(render, CacheAwareRenderer)
        assert render.controller is container.controller()
        assert container.controller().is_cached_component("Badge")

    def test_logging_configured_from_settings(self, tmp_path: Path) -> None:
        config_path = tmp_path / "rendervault.toml"
        config_path.write_text(
            '[logging]\nlevel = "debug"\nconsole_output = false\n', encoding="utf-8"
        )

        create_controller(config_path, configure_logging=True)

        package_logger = logging.getLogger("rendervault")
        assert package_logger.level == logging.DEBUG
        assert package_logger.handlers == []
