"""
Window-factory handoff to the GUI layer.

The container only knows that a hash string addresses a ``WindowRegistration``.
Creating native windows and wiring lifecycle hooks is the job of a
``WindowHost`` supplied by the application.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from .container import Container
from .dependency_tokens import get_dependency_tokens
from .model import WindowOptions, WindowRegistration

logger = logging.getLogger(__name__)


class WindowHost(Protocol):
    def create_window(self, options: WindowOptions, params: Mapping[str, Any] | None) -> Any | None: ...

    def attach_listeners(self, window: Any, manager: Any) -> None: ...


class WindowFactory:
    """Creates windows for one registration; ``create`` yields None when it cannot."""

    def __init__(
        self,
        container: Container,
        module_ref: type,
        registration: WindowRegistration | None,
        host: WindowHost | None,
    ) -> None:
        self._container = container
        self._module_ref = module_ref
        self._registration = registration
        self._host = host

    async def create(self, params: Mapping[str, Any] | None = None) -> Any | None:
        if self._registration is None or self._host is None:
            return None

        window = self._host.create_window(self._registration.metadata, params)
        manager = await create_window_instance(self._container, self._module_ref, self._registration.window_class)

        if window is None or manager is None:
            return None

        self._host.attach_listeners(window, manager)
        return window


async def create_window_instance(container: Container, module_ref: type, window_class: type) -> Any:
    """Build a window manager, injecting its dependencies from the owning module."""
    dependencies = get_dependency_tokens(window_class)
    args = await asyncio.gather(*(container.resolve(module_ref, dep) for dep in dependencies))
    return window_class(*args)


def make_get_window(
    container: Container, module_ref: type, host: WindowHost | None
) -> Callable[[str | None], WindowFactory]:
    def get_window(name: str | None = None) -> WindowFactory:
        if not name:
            return WindowFactory(container, module_ref, None, host)

        registration = container.get_provider(module_ref, name)
        if not isinstance(registration, WindowRegistration) or not registration.metadata.hash:
            logger.debug("No window registered under %s", name)
            registration = None
        return WindowFactory(container, module_ref, registration, host)

    return get_window
