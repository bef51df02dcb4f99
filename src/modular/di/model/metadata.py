"""
Module descriptors and the data exchanged with the lazy-activation and
window layers.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .providers import ProviderLike
from .tokens import Token


@dataclass(frozen=True)
class LazyConfig:
    """Defers module initialization until ``trigger`` is invoked."""

    trigger: str
    enabled: bool = True


@dataclass(frozen=True)
class ModuleMetadata:
    """
    Declarative description of a module.

    Attributes:
        imports: Modules whose exported providers become visible to this one
        providers: Providers owned by this module
        ipc: IPC handler classes initialized after the module is live
        windows: Window manager classes registered under their hash
        exports: Tokens importers are allowed to resolve
        lazy: Optional lazy-activation configuration
    """

    imports: tuple[type, ...] = ()
    providers: tuple[ProviderLike, ...] = ()
    ipc: tuple[type, ...] = ()
    windows: tuple[type, ...] = ()
    exports: tuple[Token, ...] = ()
    lazy: LazyConfig | None = None

    @classmethod
    def of(
        cls,
        imports: Sequence[type] = (),
        providers: Sequence[ProviderLike] = (),
        ipc: Sequence[type] = (),
        windows: Sequence[type] = (),
        exports: Sequence[Token] = (),
        lazy: LazyConfig | None = None,
    ) -> ModuleMetadata:
        """Build metadata from arbitrary sequences."""
        return cls(
            imports=tuple(imports),
            providers=tuple(providers),
            ipc=tuple(ipc),
            windows=tuple(windows),
            exports=tuple(exports),
            lazy=lazy,
        )

    @property
    def is_lazy(self) -> bool:
        return self.lazy is not None and self.lazy.enabled


@dataclass(frozen=True)
class LazyModuleError:
    message: str


@dataclass(frozen=True)
class LazyModuleResponse:
    """Result of invoking a lazy module trigger."""

    initialized: bool
    name: str
    error: LazyModuleError | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form sent back over the IPC channel."""
        result: dict[str, Any] = {"initialized": self.initialized, "name": self.name}
        if self.error is not None:
            result["error"] = {"message": self.error.message}
        return result


@dataclass(frozen=True)
class WindowOptions:
    """Configuration recorded by the ``window_manager`` decorator."""

    hash: str
    is_cache: bool = False
    options: Mapping[str, Any] = field(default_factory=dict)
    load_url: str | None = None


@dataclass(frozen=True)
class WindowRegistration:
    """What the container stores under a window hash."""

    metadata: WindowOptions
    window_class: type
