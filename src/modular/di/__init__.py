"""
modular.di - module-based dependency injection with lazy activation.

This library provides:
- Modules declaring providers, imports, exports, IPC handlers and windows
- Asynchronous resolution across module import boundaries
- Class, factory, value and alias providers with singleton caching
- Lazy modules activated once by a named trigger, retriable on failure
"""

from .bootstrap import BootstrapResult, bootstrap_modules
from .container import Container, default_container
from .decorators import (
    Inject,
    get_module_metadata,
    get_window_options,
    inject_tokens,
    injectable,
    ipc_handler,
    is_injectable,
    is_ipc_handler,
    module,
    window_manager,
)
from .dependency_tokens import get_dependency_tokens, get_injected_tokens
from .errors import (
    CircularDependencyError,
    DuplicateLazyTriggerError,
    EagerModuleCannotImportLazyModuleError,
    InvalidLazyTriggerError,
    InvalidProviderError,
    LazyModuleCannotImportLazyModuleError,
    LazyModuleExportsNotAllowedError,
    ModularError,
    ModuleDecoratorMissingError,
    ModuleNotRegisteredError,
    ProviderNotFoundError,
    SettingsNotInitializedError,
)
from .ipc import IpcMain, LocalIpcMain, OnInitParams, initialize_ipc_handlers, ipc_main
from .lazy import LazyModuleGate, LazyState, register_lazy_module
from .model import (
    ClassProvider,
    ExistingProvider,
    FactoryProvider,
    InjectionToken,
    LazyConfig,
    LazyModuleResponse,
    ModuleMetadata,
    Token,
    ValueProvider,
    WindowOptions,
    WindowRegistration,
)
from .registration import initialize_module, instantiate_module
from .settings import FolderSettings, Settings, get_settings, init_settings
from .windows import WindowFactory, WindowHost

__all__ = [
    "BootstrapResult",
    "CircularDependencyError",
    "ClassProvider",
    "Container",
    "DuplicateLazyTriggerError",
    "EagerModuleCannotImportLazyModuleError",
    "ExistingProvider",
    "FactoryProvider",
    "FolderSettings",
    "Inject",
    "InjectionToken",
    "InvalidLazyTriggerError",
    "InvalidProviderError",
    "IpcMain",
    "LazyConfig",
    "LazyModuleCannotImportLazyModuleError",
    "LazyModuleExportsNotAllowedError",
    "LazyModuleGate",
    "LazyModuleResponse",
    "LazyState",
    "LocalIpcMain",
    "ModularError",
    "ModuleDecoratorMissingError",
    "ModuleMetadata",
    "ModuleNotRegisteredError",
    "OnInitParams",
    "ProviderNotFoundError",
    "Settings",
    "SettingsNotInitializedError",
    "Token",
    "ValueProvider",
    "WindowFactory",
    "WindowHost",
    "WindowOptions",
    "WindowRegistration",
    "bootstrap_modules",
    "default_container",
    "get_dependency_tokens",
    "get_injected_tokens",
    "get_module_metadata",
    "get_settings",
    "get_window_options",
    "init_settings",
    "initialize_ipc_handlers",
    "initialize_module",
    "inject_tokens",
    "injectable",
    "instantiate_module",
    "ipc_handler",
    "ipc_main",
    "is_injectable",
    "is_ipc_handler",
    "module",
    "register_lazy_module",
    "window_manager",
]
