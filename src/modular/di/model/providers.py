"""
Provider definitions: the rules that produce a value for a token.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .tokens import Token


@dataclass(frozen=True)
class Provider:
    """Base for provider objects registered under an explicit token."""

    provide: Token


@dataclass(frozen=True)
class ClassProvider(Provider):
    """Bind a token to a class that is constructed with injected dependencies.

    When ``inject`` is omitted the dependencies are derived from the class
    constructor signature.
    """

    use_class: type
    inject: Sequence[Token] | None = None


@dataclass(frozen=True)
class FactoryProvider(Provider):
    """Bind a token to the result of a (possibly async) factory function."""

    use_factory: Callable[..., Any]
    inject: Sequence[Token] | None = None


@dataclass(frozen=True)
class ValueProvider(Provider):
    """Bind a token to a pre-built value."""

    use_value: Any


@dataclass(frozen=True)
class ExistingProvider(Provider):
    """Bind a token as an alias of another token."""

    use_existing: Token


# Entries accepted in a module's ``providers`` list: a class (or callable)
# registered under itself, or a provider object.
ProviderLike = type | Callable[..., Any] | Provider
