"""
Module registration pipeline: turns module descriptors into container state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .container import Container
from .decorators import get_module_metadata, get_window_options
from .dependency_tokens import get_dependency_tokens
from .errors import (
    EagerModuleCannotImportLazyModuleError,
    InvalidProviderError,
    LazyModuleCannotImportLazyModuleError,
    LazyModuleExportsNotAllowedError,
)
from .model import ModuleMetadata, Provider, WindowRegistration, token_name

logger = logging.getLogger(__name__)


def validate_module_constraints(module_ref: type, metadata: ModuleMetadata) -> None:
    """
    Check the eager/lazy rules of a module's import/export graph.

    A lazy module cannot export anything and cannot import another lazy
    module; an eager module cannot import a lazy one.
    """
    name = token_name(module_ref)

    if metadata.is_lazy and metadata.exports:
        raise LazyModuleExportsNotAllowedError(name)

    for imported_module in metadata.imports:
        imported_metadata = get_module_metadata(imported_module)
        if imported_metadata is None or not imported_metadata.is_lazy:
            continue
        if metadata.is_lazy:
            raise LazyModuleCannotImportLazyModuleError(name, token_name(imported_module))
        raise EagerModuleCannotImportLazyModuleError(name, token_name(imported_module))


async def initialize_module(container: Container, module_ref: type, metadata: ModuleMetadata) -> None:
    """
    Register a module and, recursively, everything it imports.

    Registration happens once per module: later calls for the same module
    return without side effects, so a module reachable through several import
    paths is safe to initialize from each of them.

    A module whose registration fails is removed from the container again, so
    a later attempt starts from scratch. Imports that registered completely
    stay registered.
    """
    validate_module_constraints(module_ref, metadata)
    validate_providers(module_ref, metadata)

    if not container.add_module(module_ref, metadata):
        return

    container.set_module_metadata(module_ref, metadata)

    results = await asyncio.gather(
        register_providers(container, module_ref, metadata),
        register_imports(container, metadata),
        register_windows(container, module_ref, metadata),
        register_ipc_handlers(container, module_ref, metadata),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            container.remove_module(module_ref)
            raise result


def validate_providers(module_ref: type, metadata: ModuleMetadata) -> None:
    """Reject provider entries that are neither a ``Provider`` nor callable."""
    for provider in metadata.providers:
        if not isinstance(provider, Provider) and not callable(provider):
            raise InvalidProviderError(token_name(module_ref), provider)


async def register_providers(container: Container, module_ref: type, metadata: ModuleMetadata) -> None:
    for provider in metadata.providers:
        if isinstance(provider, Provider):
            container.add_provider(module_ref, provider.provide, provider)
        else:
            container.add_provider(module_ref, provider)


async def register_imports(container: Container, metadata: ModuleMetadata) -> None:
    for imported_module in metadata.imports:
        imported_metadata = get_module_metadata(imported_module)
        if imported_metadata is None:
            logger.warning("Imported module %s has no @module descriptor, skipping", token_name(imported_module))
            continue
        await initialize_module(container, imported_module, imported_metadata)


async def register_windows(container: Container, module_ref: type, metadata: ModuleMetadata) -> None:
    for window_class in metadata.windows:
        options = get_window_options(window_class)
        if options is None or not options.hash:
            continue
        container.add_provider(module_ref, options.hash, WindowRegistration(options, window_class))


async def register_ipc_handlers(container: Container, module_ref: type, metadata: ModuleMetadata) -> None:
    for handler_class in metadata.ipc:
        container.add_provider(module_ref, handler_class)


async def instantiate_module(container: Container, module_ref: type) -> Any:
    """Construct the module class with injected dependencies and register it."""
    dependencies = get_dependency_tokens(module_ref)
    args = await asyncio.gather(*(container.resolve(module_ref, dep) for dep in dependencies))

    instance = module_ref(*args)
    container.register_instance(module_ref, instance)
    return instance
