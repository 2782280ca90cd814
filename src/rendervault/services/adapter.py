"""Cache-aware renderer for host integration.

The host keeps a reference to a renderer callable; to enable caching it is
given a CacheAwareRenderer wrapping its own renderer instead. Nothing is
patched globally.

Example:
    >>> controller = CacheController({"Greeter": {"template_attrs": ["text"]}})
    >>> render = CacheAwareRenderer(controller, host.render_component)
    >>> html = render(Greeter, {"text": "Hello"}, instance_id="r1")
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from rendervault.services.controller import CacheController

ComponentRenderer = Callable[[Any, Any, Optional[str]], str]


def resolve_component_name(component: Any) -> str:
    """Return the declared name of a component.

    Looks at ``display_name``, then ``__name__``, then the class name of
    component instances.
    """
    display_name = getattr(component, "display_name", None)
    if isinstance(display_name, str) and display_name:
        return display_name
    name = getattr(component, "__name__", None)
    if isinstance(name, str) and name:
        return name
    return type(component).__name__


class CacheAwareRenderer:
    """Drop-in replacement for a host renderer that consults the cache.

    Args:
        controller: Controller owning the cache.
        render: Host renderer called as ``render(component, props, instance_id)``.
        name_resolver: Maps a component to its declared name.
    """

    def __init__(
        self,
        controller: CacheController,
        render: ComponentRenderer,
        name_resolver: Callable[[Any], str] = resolve_component_name,
    ) -> None:
        self.controller = controller
        self._render = render
        self._name_resolver = name_resolver

    def __call__(self, component: Any, props: Any, instance_id: Optional[str] = None) -> str:
        return self.controller.handle(
            self._name_resolver(component),
            props,
            lambda current_props: self._render(component, current_props, instance_id),
            instance_id,
        )
