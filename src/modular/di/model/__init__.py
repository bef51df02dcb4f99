"""
Model subpackage containing core data structures and types.

This subpackage contains the value types that describe what can be injected
and how modules are declared. It has no dependencies on the container so it
can be imported from anywhere without circular imports.
"""

from .metadata import (
    LazyConfig,
    LazyModuleError,
    LazyModuleResponse,
    ModuleMetadata,
    WindowOptions,
    WindowRegistration,
)
from .providers import (
    ClassProvider,
    ExistingProvider,
    FactoryProvider,
    Provider,
    ProviderLike,
    ValueProvider,
)
from .tokens import InjectionToken, Token, token_name

__all__ = [
    "ClassProvider",
    "ExistingProvider",
    "FactoryProvider",
    "InjectionToken",
    "LazyConfig",
    "LazyModuleError",
    "LazyModuleResponse",
    "ModuleMetadata",
    "Provider",
    "ProviderLike",
    "Token",
    "ValueProvider",
    "WindowOptions",
    "WindowRegistration",
    "token_name",
]
