"""
IPC channel registry and IPC handler initialization.

The module system only needs two things from a messaging host: "register a
handler for channel X" and "that handler is awaited when X is invoked". Any
transport satisfying ``IpcMain`` can be plugged in; ``LocalIpcMain`` is the
in-process implementation.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

from .container import Container
from .model import ModuleMetadata, token_name
from .windows import WindowFactory, WindowHost, make_get_window

logger = logging.getLogger(__name__)

IpcHandlerFn = Callable[..., Awaitable[Any]]


class IpcMain(Protocol):
    def handle(self, channel: str, handler: IpcHandlerFn) -> None: ...


class LocalIpcMain:
    """In-process channel registry."""

    def __init__(self) -> None:
        self._handlers: dict[str, IpcHandlerFn] = {}

    def handle(self, channel: str, handler: IpcHandlerFn) -> None:
        if channel in self._handlers:
            raise ValueError(f"Attempted to register a second handler for '{channel}'")
        self._handlers[channel] = handler
        logger.debug("Registered IPC handler for channel %s", channel)

    def has_handler(self, channel: str) -> bool:
        return channel in self._handlers

    def remove_handler(self, channel: str) -> None:
        self._handlers.pop(channel, None)

    async def invoke(self, channel: str, *args: Any) -> Any:
        handler = self._handlers.get(channel)
        if handler is None:
            raise LookupError(f"No handler registered for '{channel}'")
        return await handler(*args)


ipc_main = LocalIpcMain()


@dataclass(frozen=True)
class OnInitParams:
    """Passed to ``on_init`` of every IPC handler."""

    get_window: Callable[[str | None], WindowFactory]


async def initialize_ipc_handlers(
    container: Container,
    module_ref: type,
    metadata: ModuleMetadata,
    window_host: WindowHost | None = None,
) -> None:
    """Resolve the module's IPC handlers and run their ``on_init`` hooks."""
    if not metadata.ipc:
        return

    params = OnInitParams(get_window=make_get_window(container, module_ref, window_host))

    for handler_class in metadata.ipc:
        handler = await container.resolve(module_ref, handler_class)
        on_init = getattr(handler, "on_init", None)
        if on_init is None:
            continue

        logger.debug("Initializing IPC handler %s", token_name(handler_class))
        result = on_init(params)
        if inspect.isawaitable(result):
            await result
