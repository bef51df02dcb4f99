"""
Lazy module activation.

A lazy module is registered with a trigger channel instead of being
initialized at bootstrap. The first invocation of the trigger runs the full
registration pipeline; concurrent invocations share that one attempt. Success
is final, while a failure resets the gate so the next invocation retries.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from .container import Container
from .errors import InvalidLazyTriggerError
from .ipc import IpcMain, initialize_ipc_handlers
from .model import LazyModuleError, LazyModuleResponse, ModuleMetadata, token_name
from .registration import initialize_module, instantiate_module, validate_module_constraints
from .windows import WindowHost

logger = logging.getLogger(__name__)


class LazyState(Enum):
    REGISTERED = "registered"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"
    FAILED = "failed"


def get_valid_lazy_trigger(module_ref: type, metadata: ModuleMetadata) -> str:
    """Return the stripped trigger name, or raise if it is missing or blank."""
    trigger = metadata.lazy.trigger if metadata.lazy is not None else None
    if not isinstance(trigger, str) or not trigger.strip():
        raise InvalidLazyTriggerError(token_name(module_ref))
    return trigger.strip()


class LazyModuleGate:
    """Runs a lazy module's activation at most once per successful attempt."""

    def __init__(
        self,
        container: Container,
        module_ref: type,
        metadata: ModuleMetadata,
        window_host: WindowHost | None = None,
    ) -> None:
        self.container = container
        self.module_ref = module_ref
        self.metadata = metadata
        self.trigger = get_valid_lazy_trigger(module_ref, metadata)
        self._window_host = window_host
        self._state = LazyState.REGISTERED
        self._task: asyncio.Task[LazyModuleResponse] | None = None

    @property
    def state(self) -> LazyState:
        return self._state

    async def invoke(self) -> LazyModuleResponse:
        """Activate the module, or join / return the existing activation."""
        if self._task is None:
            logger.debug("Lazy trigger %s fired for %s", self.trigger, token_name(self.module_ref))
            self._state = LazyState.INITIALIZING
            self._task = asyncio.ensure_future(self._activate())
        return await asyncio.shield(self._task)

    async def _activate(self) -> LazyModuleResponse:
        try:
            await activate_module(self.container, self.module_ref, self.metadata, self._window_host)
        except Exception as exc:
            self._task = None
            self._state = LazyState.FAILED
            logger.warning("Lazy module %s failed to initialize: %s", token_name(self.module_ref), exc)
            return LazyModuleResponse(initialized=False, name=self.trigger, error=LazyModuleError(str(exc)))

        self._state = LazyState.INITIALIZED
        logger.info("Lazy module %s initialized via %s", token_name(self.module_ref), self.trigger)
        return LazyModuleResponse(initialized=True, name=self.trigger)

    async def __call__(self, *_args: Any) -> dict[str, Any]:
        """IPC entry point; extra transport arguments are ignored."""
        response = await self.invoke()
        return response.to_dict()


async def activate_module(
    container: Container,
    module_ref: type,
    metadata: ModuleMetadata,
    window_host: WindowHost | None = None,
) -> None:
    """Bring a module fully live: register, instantiate and start its IPC handlers."""
    await initialize_module(container, module_ref, metadata)
    await instantiate_module(container, module_ref)
    await container.resolve(module_ref, module_ref)

    if metadata.windows and not metadata.ipc:
        logger.warning(
            'Window(s) declared in module "%s" but no IPC handlers found to manage them.',
            token_name(module_ref),
        )

    await initialize_ipc_handlers(container, module_ref, metadata, window_host)


def register_lazy_module(
    container: Container,
    module_ref: type,
    metadata: ModuleMetadata,
    ipc: IpcMain,
    window_host: WindowHost | None = None,
) -> LazyModuleGate:
    """
    Install the activation gate of a lazy module on its trigger channel.

    Nothing is registered in the container until the trigger fires, but the
    trigger name and the module's import/export constraints are checked now.
    """
    gate = LazyModuleGate(container, module_ref, metadata, window_host)
    validate_module_constraints(module_ref, metadata)
    ipc.handle(gate.trigger, gate)
    logger.debug("Registered lazy module %s on trigger %s", token_name(module_ref), gate.trigger)
    return gate
