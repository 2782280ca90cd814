"""
Pytest configuration and shared fixtures for RenderVault tests.

This module provides the host renderer double and the component fixtures
used across the core, services and CLI test modules.
"""

from __future__ import annotations

import html
import logging
import os
from collections.abc import Generator
from typing import Any

import pytest

from rendervault.services import CacheController, LRUCacheStore
from rendervault.shared.constants import Logging


class HtmlRenderer:
    """Small deterministic host renderer.

    Renders ``<div data-instance-id="...">`` wrappers around escaped props
    and counts how often it ran.
    """

    def __init__(self) -> None:
        self.calls = 0
        self.last_props: Any = None

    def greeting(self, props: Any, instance_id: str = "r1") -> str:
        self.calls += 1
        self.last_props = props
        text = html.escape(str(props.get("text", "")), quote=True)
        name = html.escape(str(props.get("name", "")), quote=True)
        return (
            f'<div data-instance-id="{instance_id}">'
            f'<span data-instance-id="{instance_id}.0">{text}</span>'
            f'<b data-instance-id="{instance_id}.1">{name}</b>'
            "</div>"
        )

    def listing(self, props: Any, instance_id: str = "r1") -> str:
        self.calls += 1
        self.last_props = props
        items = "".join(
            f"<li>{html.escape(str(item['label']), quote=True)}</li>" for item in props["items"]
        )
        return f'<ul data-instance-id="{instance_id}">{items}</ul>'


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo handler setup done by CLI invocations so caplog keeps working."""
    yield
    package_logger = logging.getLogger(Logging.ROOT_LOGGER)
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Isolate settings from the developer's environment and .env file."""
    for name in list(os.environ):
        if name.startswith("RENDERVAULT_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def renderer() -> HtmlRenderer:
    return HtmlRenderer()


@pytest.fixture
def store() -> LRUCacheStore:
    return LRUCacheStore()


@pytest.fixture
def events() -> list[Any]:
    """Collected cache events."""
    return []


@pytest.fixture
def controller(store: LRUCacheStore, events: list[Any]) -> Generator[CacheController, None, None]:
    """Controller with a templatized Greeter and a plain Badge component."""
    cache_controller = CacheController(
        {
            "Greeter": {"template_attrs": ["text"], "cache_attrs": ["name"]},
            "Badge": {},
        },
        store=store,
        event_callback=events.append,
    )
    yield cache_controller
    cache_controller.close()
