"""
Exceptions raised by the module system.

Registration and structural errors are programmer errors: they propagate to
the bootstrap caller and are expected to halt startup. ``ProviderNotFoundError``
leaves the container intact, so callers may register the missing provider and
retry.
"""

from __future__ import annotations

from collections.abc import Sequence


class ModularError(Exception):
    """Base class for all module system errors."""


class ModuleNotRegisteredError(ModularError):
    """A module is referenced before it was added to the container."""

    def __init__(self, module_name: str):
        self.module_name = module_name
        super().__init__(f'Module "{module_name}" is not registered in the container.')


class ProviderNotFoundError(ModularError, LookupError):
    """No provider for a token, neither locally nor through exported imports."""

    def __init__(self, token_name: str, module_name: str):
        self.token_name = token_name
        self.module_name = module_name
        super().__init__(
            f'Provider not found for token "{token_name}" in module "{module_name}" or its imports.'
        )


class InvalidProviderError(ModularError, ValueError):
    """A providers entry is neither a callable nor a provider object."""

    def __init__(self, module_name: str, provider: object = None):
        self.module_name = module_name
        self.provider = provider
        super().__init__(f"Invalid provider definition registered in module {module_name}: {provider!r}")


class ModuleDecoratorMissingError(ModularError):
    """A class passed to bootstrap was never decorated with ``@module``."""

    def __init__(self, module_name: str):
        self.module_name = module_name
        super().__init__(f"Module {module_name} does not have the @module decorator")


class InvalidLazyTriggerError(ModularError, ValueError):
    def __init__(self, module_name: str):
        self.module_name = module_name
        super().__init__(f'Lazy module "{module_name}" must declare a non-empty trigger name.')


class DuplicateLazyTriggerError(ModularError):
    def __init__(self, trigger: str, module_name: str, other_module_name: str):
        self.trigger = trigger
        self.module_name = module_name
        self.other_module_name = other_module_name
        super().__init__(
            f'Lazy trigger "{trigger}" of module "{module_name}" is already used by module "{other_module_name}".'
        )


class LazyModuleExportsNotAllowedError(ModularError):
    def __init__(self, module_name: str):
        self.module_name = module_name
        super().__init__(f'Lazy module "{module_name}" cannot declare exports.')


class LazyModuleCannotImportLazyModuleError(ModularError):
    def __init__(self, module_name: str, imported_module_name: str):
        self.module_name = module_name
        self.imported_module_name = imported_module_name
        super().__init__(
            f'Lazy module "{module_name}" cannot import lazy module "{imported_module_name}".'
        )


class EagerModuleCannotImportLazyModuleError(ModularError):
    def __init__(self, module_name: str, imported_module_name: str):
        self.module_name = module_name
        self.imported_module_name = imported_module_name
        super().__init__(
            f'Module "{module_name}" cannot import lazy module "{imported_module_name}".'
        )


class CircularDependencyError(ModularError):
    """A provider depends on itself, directly or transitively."""

    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.chain)}")


class SettingsNotInitializedError(ModularError, RuntimeError):
    def __init__(self) -> None:
        super().__init__("App settings cache has not been initialized.")
