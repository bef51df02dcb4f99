"""
Bootstrap - brings a list of top-level modules live, in declaration order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .container import Container, default_container
from .decorators import get_module_metadata
from .errors import DuplicateLazyTriggerError, ModuleDecoratorMissingError
from .ipc import IpcMain
from .ipc import ipc_main as default_ipc_main
from .lazy import LazyModuleGate, activate_module, get_valid_lazy_trigger, register_lazy_module
from .model import ModuleMetadata, token_name
from .registration import validate_module_constraints
from .windows import WindowHost

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Modules brought live eagerly, and the gates installed for lazy ones."""

    modules: list[type] = field(default_factory=list)
    lazy_gates: dict[str, LazyModuleGate] = field(default_factory=dict)


async def bootstrap_modules(
    modules: Sequence[type],
    *,
    container: Container | None = None,
    ipc: IpcMain | None = None,
    window_host: WindowHost | None = None,
) -> BootstrapResult:
    """
    Initialize top-level modules one after another.

    Descriptors and lazy triggers of all modules are checked first, so a
    structural error aborts before any module is activated or any trigger is
    installed. Each eager module is then fully registered, instantiated and
    has its IPC handlers initialized before the next one starts. Lazy modules
    only get their trigger installed.

    Args:
        modules: Module classes decorated with ``@module``
        container: Target container (defaults to the process-wide one)
        ipc: Channel registry for lazy triggers (defaults to the process-wide one)
        window_host: GUI layer used by window factories handed to IPC handlers

    Raises:
        ModuleDecoratorMissingError: If a module has no descriptor
        DuplicateLazyTriggerError: If two lazy modules share a trigger
    """
    target = container if container is not None else default_container
    channels = ipc if ipc is not None else default_ipc_main
    result = BootstrapResult()

    for module_ref, metadata in _collect_descriptors(modules):
        if metadata.is_lazy:
            gate = register_lazy_module(target, module_ref, metadata, channels, window_host)
            result.lazy_gates[gate.trigger] = gate
            continue

        logger.info("Bootstrapping module %s", token_name(module_ref))
        await activate_module(target, module_ref, metadata, window_host)
        result.modules.append(module_ref)

    return result


def _collect_descriptors(modules: Sequence[type]) -> list[tuple[type, ModuleMetadata]]:
    descriptors: list[tuple[type, ModuleMetadata]] = []
    lazy_owners: dict[str, type] = {}

    for module_ref in modules:
        metadata = get_module_metadata(module_ref)
        if metadata is None:
            raise ModuleDecoratorMissingError(token_name(module_ref))

        if metadata.is_lazy:
            trigger = get_valid_lazy_trigger(module_ref, metadata)
            if trigger in lazy_owners:
                raise DuplicateLazyTriggerError(trigger, token_name(module_ref), token_name(lazy_owners[trigger]))
            lazy_owners[trigger] = module_ref
            validate_module_constraints(module_ref, metadata)

        descriptors.append((module_ref, metadata))

    return descriptors
