"""
Container - module registry, singleton cache and asynchronous resolution.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .dependency_tokens import get_dependency_tokens
from .errors import CircularDependencyError, ModuleNotRegisteredError, ProviderNotFoundError
from .model import (
    ClassProvider,
    ExistingProvider,
    FactoryProvider,
    ModuleMetadata,
    Token,
    ValueProvider,
    token_name,
)

logger = logging.getLogger(__name__)

# Distinguishes "nothing found" from a legitimately resolved None.
_MISSING: Any = object()

_ResolutionPath = tuple[tuple[type, Any], ...]

_PROVIDER_SHAPES = (FactoryProvider, ClassProvider, ValueProvider, ExistingProvider)


def _chain(path: _ResolutionPath, cache_key: tuple[type, Any]) -> list[str]:
    return [f"{token_name(m)}:{token_name(t)}" for m, t in (*path, cache_key)]


@dataclass
class ModuleData:
    """Registry entry owned by the container for one module."""

    providers: dict[Any, Any] = field(default_factory=dict)
    exports: set[Any] = field(default_factory=set)


class Container:
    """
    Registry of modules and their providers, plus the caches used to resolve them.

    Every module owns a provider map and an export set. Resolution looks at
    the requesting module first and then at the exports of the modules it
    imports. Instances are cached by token in a single singleton cache shared
    by all modules, and per ``(module, token)`` in a resolution cache.

    A token is constructed at most once: while it is being built, every other
    request for it (a sibling dependency resolved in parallel, or a concurrent
    ``resolve`` call) awaits the same build.

    The container is not thread-safe: it is meant to be driven from a single
    event loop, where check-then-act sequences on the caches cannot interleave
    with a parallel writer.
    """

    def __init__(self) -> None:
        self._modules: dict[type, ModuleData] = {}
        self._module_metadata: dict[type, ModuleMetadata] = {}
        self._instances: dict[Any, Any] = {}
        self._resolution_cache: dict[tuple[type, Any], Any] = {}
        self._building: dict[Any, asyncio.Future[Any]] = {}
        # (tokens on the waiting path, token being awaited) for every joined build
        self._blocked: list[tuple[frozenset[Any], Any]] = []

    def add_module(self, module_ref: type, metadata: ModuleMetadata) -> bool:
        """
        Create the registry entry for a module.

        Returns:
            False without touching the registry when the module is already present
        """
        if module_ref in self._modules:
            return False

        self._modules[module_ref] = ModuleData(exports=set(metadata.exports))
        logger.debug("Registered module %s", token_name(module_ref))
        return True

    def remove_module(self, module_ref: type) -> None:
        """Forget a module's registry entry, metadata and resolution cache entries."""
        self._modules.pop(module_ref, None)
        self._module_metadata.pop(module_ref, None)
        for cache_key in [key for key in self._resolution_cache if key[0] is module_ref]:
            del self._resolution_cache[cache_key]
        logger.debug("Removed module %s", token_name(module_ref))

    def set_module_metadata(self, module_ref: type, metadata: ModuleMetadata) -> None:
        self._module_metadata[module_ref] = metadata

    def has_module(self, module_ref: type) -> bool:
        return module_ref in self._modules

    def add_provider(self, module_ref: type, token: Token, provider: Any = _MISSING) -> None:
        """
        Register a provider on a module.

        When ``provider`` is omitted the token itself is stored, which is how a
        class registers under its own type.

        Raises:
            ModuleNotRegisteredError: If the module has not been added yet
        """
        module_data = self._modules.get(module_ref)
        if module_data is None:
            raise ModuleNotRegisteredError(token_name(module_ref))

        module_data.providers[token] = token if provider is _MISSING else provider
        logger.debug("Added provider %s to module %s", token_name(token), token_name(module_ref))

    def get_provider(self, module_ref: type, token: Token) -> Any | None:
        module_data = self._modules.get(module_ref)
        if module_data is None:
            return None
        return module_data.providers.get(token)

    def get_module_exports(self, module_ref: type) -> set[Any]:
        module_data = self._modules.get(module_ref)
        return module_data.exports if module_data is not None else set()

    def get_module_metadata(self, module_ref: type) -> ModuleMetadata | None:
        return self._module_metadata.get(module_ref)

    def register_instance(self, token: Token, instance: Any) -> None:
        """Put an instance straight into the singleton cache."""
        self._instances[token] = instance

    def has_instance(self, token: Token) -> bool:
        return token in self._instances

    async def resolve(self, module_ref: type, token: Token) -> Any:
        """
        Resolve ``token`` as seen from ``module_ref``.

        Returns:
            The instance, or None when a module resolves its own type and has
            no provider for it

        Raises:
            ProviderNotFoundError: If neither the module nor its exporting
                imports provide the token
            CircularDependencyError: If the token depends on itself
        """
        return await self._resolve(module_ref, token, ())

    async def _resolve(self, module_ref: type, token: Any, path: _ResolutionPath) -> Any:
        cache_key = (module_ref, token)

        if cache_key in self._resolution_cache:
            return self._resolution_cache[cache_key]

        if token in self._instances:
            instance = self._instances[token]
            self._resolution_cache[cache_key] = instance
            return instance

        if cache_key in path:
            raise CircularDependencyError(_chain(path, cache_key))

        build = self._building.get(token)
        if build is not None:
            instance = await self._join_build(token, build, path, cache_key)
            self._resolution_cache[cache_key] = instance
            return instance

        path = (*path, cache_key)

        provider = self.get_provider(module_ref, token)

        if provider is None:
            resolved = await self._resolve_from_imports(module_ref, token, path)

            if resolved is not _MISSING:
                self._resolution_cache[cache_key] = resolved
                return resolved

            if token is not module_ref:
                raise ProviderNotFoundError(token_name(token), token_name(module_ref))

            return None

        instance = await self._instantiate_provider(module_ref, token, provider, path)
        self._resolution_cache[cache_key] = instance
        return instance

    async def _resolve_from_imports(self, module_ref: type, token: Any, path: _ResolutionPath) -> Any:
        metadata = self.get_module_metadata(module_ref)
        if metadata is None:
            return _MISSING

        for imported_module in metadata.imports:
            if token not in self.get_module_exports(imported_module):
                continue
            if self.get_provider(imported_module, token) is not None:
                return await self._resolve(imported_module, token, path)

        return _MISSING

    async def _join_build(
        self, token: Any, build: asyncio.Future[Any], path: _ResolutionPath, cache_key: tuple[type, Any]
    ) -> Any:
        waiting = frozenset(t for _, t in path)
        if self._build_waits_on(token, waiting):
            raise CircularDependencyError(_chain(path, cache_key))

        logger.debug("Waiting for %s, already being built", token_name(token))
        entry = (waiting, token)
        self._blocked.append(entry)
        try:
            return await asyncio.shield(build)
        finally:
            self._blocked.remove(entry)

    def _build_waits_on(self, token: Any, waiting: frozenset[Any]) -> bool:
        """Whether the build of ``token`` is, directly or transitively, blocked on one of ``waiting``."""
        seen: set[Any] = set()
        stack = [token]
        while stack:
            current = stack.pop()
            if current in waiting:
                return True
            if current in seen:
                continue
            seen.add(current)
            stack.extend(target for blocked_path, target in self._blocked if current in blocked_path)
        return False

    async def _instantiate_provider(self, module_ref: type, token: Any, provider: Any, path: _ResolutionPath) -> Any:
        if not isinstance(provider, _PROVIDER_SHAPES) and not callable(provider):
            # Raw values stored with add_provider (e.g. window registrations)
            # are returned as-is and stay out of the singleton cache.
            return provider

        build: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._building[token] = build
        try:
            instance = await self._construct(module_ref, provider, path)
        except asyncio.CancelledError:
            build.cancel()
            raise
        except Exception as exc:
            build.set_exception(exc)
            # Joined requests re-raise it; mark it retrieved for builds nobody joined.
            build.exception()
            raise
        finally:
            self._building.pop(token, None)

        logger.debug("Instantiated %s in module %s", token_name(token), token_name(module_ref))
        self._instances[token] = instance
        build.set_result(instance)
        return instance

    async def _construct(self, module_ref: type, provider: Any, path: _ResolutionPath) -> Any:
        if isinstance(provider, FactoryProvider):
            args = await self._resolve_dependencies(module_ref, provider.inject or (), path)
            instance = provider.use_factory(*args)
            if inspect.isawaitable(instance):
                instance = await instance
            return instance
        if isinstance(provider, ClassProvider):
            dependencies = provider.inject if provider.inject is not None else get_dependency_tokens(provider.use_class)
            args = await self._resolve_dependencies(module_ref, dependencies, path)
            return provider.use_class(*args)
        if isinstance(provider, ValueProvider):
            return provider.use_value
        if isinstance(provider, ExistingProvider):
            return await self._resolve(module_ref, provider.use_existing, path)

        args = await self._resolve_dependencies(module_ref, get_dependency_tokens(provider), path)
        return provider(*args)

    async def _resolve_dependencies(
        self, module_ref: type, dependencies: Sequence[Any], path: _ResolutionPath
    ) -> list[Any]:
        return list(await asyncio.gather(*(self._resolve(module_ref, dep, path) for dep in dependencies)))


default_container = Container()
