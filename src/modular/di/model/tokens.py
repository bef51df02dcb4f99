"""
Token definitions for dependency injection.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class InjectionToken:
    """
    A unique token with no backing type.

    Two tokens are never equal, even with the same description, so they can be
    used as collision-free keys for values that have no natural class
    (configuration objects, interfaces expressed as protocols, and so on).
    """

    __slots__ = ("description",)

    def __init__(self, description: str = "") -> None:
        self.description = description

    def __repr__(self) -> str:
        return f"InjectionToken({self.description!r})"

    def __str__(self) -> str:
        return self.description or repr(self)


Token = type | str | InjectionToken | Callable[..., Any]


def token_name(token: Any) -> str:
    """Human-readable name of a token, used in logs and error messages."""
    if isinstance(token, str):
        return token
    if isinstance(token, InjectionToken):
        return str(token)
    return getattr(token, "__name__", str(token))
