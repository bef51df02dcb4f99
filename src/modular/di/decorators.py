"""
Class and parameter annotations for the module system.

Descriptors are kept in side tables keyed by class identity rather than on the
class itself, so a subclass of a module never silently inherits its parent's
descriptor.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar
from weakref import WeakKeyDictionary

from .model import LazyConfig, ModuleMetadata, ProviderLike, Token, WindowOptions

C = TypeVar("C", bound=type)
F = TypeVar("F", bound=Callable[..., Any])

_module_metadata: WeakKeyDictionary[type, ModuleMetadata] = WeakKeyDictionary()
_window_options: WeakKeyDictionary[type, WindowOptions] = WeakKeyDictionary()
_explicit_tokens: WeakKeyDictionary[Callable[..., Any], dict[int, Token]] = WeakKeyDictionary()
_injectables: WeakKeyDictionary[type, bool] = WeakKeyDictionary()
_ipc_handlers: WeakKeyDictionary[type, bool] = WeakKeyDictionary()


@dataclass(frozen=True)
class Inject:
    """
    Parameter annotation that overrides the token injected at that position.

    Example:
        ```python
        API = InjectionToken("rest-api")

        class UserService:
            def __init__(self, api: Annotated[RestApi, Inject(API)]):
                self.api = api
        ```
    """

    token: Token

    def __repr__(self) -> str:
        return f"Inject({self.token!r})"


def module(
    *,
    imports: Sequence[type] = (),
    providers: Sequence[ProviderLike] = (),
    ipc: Sequence[type] = (),
    windows: Sequence[type] = (),
    exports: Sequence[Token] = (),
    lazy: LazyConfig | None = None,
) -> Callable[[C], C]:
    """Declare a class as a module with the given descriptor."""
    metadata = ModuleMetadata.of(
        imports=imports,
        providers=providers,
        ipc=ipc,
        windows=windows,
        exports=exports,
        lazy=lazy,
    )

    def decorator(cls: C) -> C:
        _module_metadata[cls] = metadata
        return cls

    return decorator


def get_module_metadata(cls: type) -> ModuleMetadata | None:
    """Return the descriptor attached by ``@module``, or None."""
    try:
        return _module_metadata.get(cls)
    except TypeError:
        return None


def injectable() -> Callable[[C], C]:
    """Mark a class as injectable. Purely informational for the container."""

    def decorator(cls: C) -> C:
        _injectables[cls] = True
        return cls

    return decorator


def is_injectable(cls: type) -> bool:
    return _injectables.get(cls, False)


def ipc_handler() -> Callable[[C], C]:
    """Mark a class as an IPC handler; its optional ``on_init`` runs at bootstrap."""

    def decorator(cls: C) -> C:
        _ipc_handlers[cls] = True
        return cls

    return decorator


def is_ipc_handler(cls: type) -> bool:
    return _ipc_handlers.get(cls, False)


def window_manager(
    *,
    hash: str,
    is_cache: bool = False,
    options: Mapping[str, Any] | None = None,
    load_url: str | None = None,
) -> Callable[[C], C]:
    """Declare a window manager class addressed by ``hash``."""
    window = WindowOptions(hash=hash, is_cache=is_cache, options=dict(options or {}), load_url=load_url)

    def decorator(cls: C) -> C:
        _window_options[cls] = window
        return cls

    return decorator


def get_window_options(cls: type) -> WindowOptions | None:
    return _window_options.get(cls)


def inject_tokens(tokens: Mapping[int, Token]) -> Callable[[F], F]:
    """
    Override injected tokens by parameter index.

    Useful for callables whose annotations cannot carry ``Inject`` markers.
    Later calls merge into earlier ones.
    """

    def decorator(target: F) -> F:
        existing = _explicit_tokens.setdefault(target, {})
        existing.update(tokens)
        return target

    return decorator


def get_explicit_tokens(target: Callable[..., Any]) -> dict[int, Token]:
    try:
        return dict(_explicit_tokens.get(target, {}))
    except TypeError:
        return {}
