"""
Constructor introspection: which tokens does a class or factory need?
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Annotated, Any, get_origin, get_type_hints
from weakref import WeakKeyDictionary

from .decorators import Inject, get_explicit_tokens
from .model import Token

logger = logging.getLogger(__name__)

_dependency_tokens_cache: WeakKeyDictionary[Callable[..., Any], list[Token | None]] = WeakKeyDictionary()

_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def get_dependency_tokens(target: Callable[..., Any]) -> list[Token | None]:
    """
    Return the ordered tokens a constructor (or factory) requires.

    The base list comes from the runtime type hints of the positional
    parameters; ``Annotated`` hints are reduced to their underlying type and
    parameters without a hint leave ``None`` at their position. Overrides from
    ``Inject`` markers and ``inject_tokens`` take precedence at their index and
    may extend the list past the declared parameters.

    Results are memoized per target.
    """
    try:
        cached = _dependency_tokens_cache.get(target)
    except TypeError:
        cached = None
    if cached is not None:
        return list(cached)

    parameters, hints = _inspect_target(target)
    base: list[Token | None] = [_strip_annotated(hints.get(p.name)) for p in parameters]
    injected = _collect_injected_tokens(target, parameters, hints)

    length = max(len(base), max(injected, default=-1) + 1)
    tokens: list[Token | None] = [
        injected[index] if index in injected else (base[index] if index < len(base) else None)
        for index in range(length)
    ]

    try:
        _dependency_tokens_cache[target] = tokens
    except TypeError:
        pass  # not weak-referenceable, skip memoization
    return list(tokens)


def get_injected_tokens(target: Callable[..., Any]) -> dict[int, Token]:
    """Return the explicit ``index -> token`` overrides declared for ``target``."""
    parameters, hints = _inspect_target(target)
    return _collect_injected_tokens(target, parameters, hints)


def _collect_injected_tokens(
    target: Callable[..., Any],
    parameters: list[inspect.Parameter],
    hints: dict[str, Any],
) -> dict[int, Token]:
    injected: dict[int, Token] = {}
    for index, parameter in enumerate(parameters):
        hint = hints.get(parameter.name)
        if get_origin(hint) is Annotated:
            for marker in hint.__metadata__:
                if isinstance(marker, Inject):
                    injected[index] = marker.token
    injected.update(get_explicit_tokens(target))
    return injected


def _inspect_target(target: Callable[..., Any]) -> tuple[list[inspect.Parameter], dict[str, Any]]:
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        return [], {}

    parameters = [p for p in signature.parameters.values() if p.kind in _POSITIONAL_KINDS]
    return parameters, _get_type_hints(target)


def _get_type_hints(target: Callable[..., Any]) -> dict[str, Any]:
    hinted = inspect.getattr_static(target, "__init__", None) if inspect.isclass(target) else target
    if hinted is None:
        return {}
    try:
        hints = get_type_hints(hinted, include_extras=True)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning(
            "'%s' name error retrieving %s type hints",
            exc.name,
            getattr(target, "__qualname__", target),
        )
        hints = {}
    hints.pop("return", None)
    return hints


def _strip_annotated(hint: Any) -> Token | None:
    if hint is None:
        return None
    if get_origin(hint) is Annotated:
        return hint.__origin__  # type: ignore[no-any-return]
    return hint  # type: ignore[no-any-return]
