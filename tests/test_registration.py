"""
Tests for the module registration pipeline.
"""

import logging
from typing import Annotated

import pytest

from modular.di import (
    Container,
    EagerModuleCannotImportLazyModuleError,
    Inject,
    InvalidProviderError,
    LazyConfig,
    LazyModuleCannotImportLazyModuleError,
    LazyModuleExportsNotAllowedError,
    ValueProvider,
    WindowRegistration,
    get_module_metadata,
    initialize_module,
    instantiate_module,
    ipc_handler,
    module,
    window_manager,
)


class Database:
    pass


class Repository:
    def __init__(self, database: Database):
        self.database = database


@module(providers=[Database], exports=[Database])
class DatabaseModule:
    pass


@module(imports=[DatabaseModule], providers=[Repository], exports=[Repository])
class RepositoryModule:
    pass


@module(imports=[DatabaseModule, RepositoryModule], providers=[ValueProvider(provide="name", use_value="app")])
class AppModule:
    def __init__(self, repository: Repository, name: Annotated[str, Inject("name")]):
        self.repository = repository
        self.name = name


@module(lazy=LazyConfig(trigger="reports"))
class ReportsModule:
    pass


async def init(container: Container, module_ref: type) -> None:
    await initialize_module(container, module_ref, get_module_metadata(module_ref))


@pytest.mark.asyncio
async def test_registers_providers_and_imports(container: Container) -> None:
    await init(container, AppModule)

    assert container.has_module(AppModule)
    assert container.has_module(RepositoryModule)
    assert container.has_module(DatabaseModule)
    assert container.get_provider(RepositoryModule, Repository) is Repository
    assert container.get_module_exports(DatabaseModule) == {Database}
    assert container.get_module_metadata(AppModule) is get_module_metadata(AppModule)


@pytest.mark.asyncio
async def test_second_initialization_is_a_no_op(container: Container) -> None:
    await init(container, DatabaseModule)
    database = await container.resolve(DatabaseModule, Database)

    await init(container, DatabaseModule)

    assert container.get_provider(DatabaseModule, Database) is Database
    assert await container.resolve(DatabaseModule, Database) is database


@pytest.mark.asyncio
async def test_shared_import_reached_through_two_paths(container: Container) -> None:
    await init(container, AppModule)

    repository = await container.resolve(AppModule, Repository)
    database = await container.resolve(AppModule, Database)

    assert repository.database is database


@pytest.mark.asyncio
async def test_invalid_provider_entry(container: Container) -> None:
    @module(providers=[42])
    class BrokenModule:
        pass

    with pytest.raises(InvalidProviderError, match="BrokenModule"):
        await init(container, BrokenModule)

    assert not container.has_module(BrokenModule)


@pytest.mark.asyncio
async def test_valid_providers_are_not_registered_next_to_an_invalid_one(container: Container) -> None:
    @module(providers=[Database, 42])
    class HalfBrokenModule:
        pass

    with pytest.raises(InvalidProviderError):
        await init(container, HalfBrokenModule)

    assert not container.has_module(HalfBrokenModule)
    assert container.get_provider(HalfBrokenModule, Database) is None


@pytest.mark.asyncio
async def test_failed_import_rolls_back_the_importer(container: Container) -> None:
    @module(providers=[42])
    class BrokenImport:
        pass

    @module(imports=[DatabaseModule, BrokenImport], providers=[Repository])
    class ImporterModule:
        pass

    with pytest.raises(InvalidProviderError, match="BrokenImport"):
        await init(container, ImporterModule)

    assert not container.has_module(ImporterModule)
    assert not container.has_module(BrokenImport)
    assert container.has_module(DatabaseModule)

    with pytest.raises(InvalidProviderError):
        await init(container, ImporterModule)


@pytest.mark.asyncio
async def test_lazy_module_with_exports_fails_before_registration(container: Container) -> None:
    @module(providers=[Database], exports=[Database], lazy=LazyConfig(trigger="db"))
    class LazyExporter:
        pass

    with pytest.raises(LazyModuleExportsNotAllowedError):
        await init(container, LazyExporter)

    assert not container.has_module(LazyExporter)


@pytest.mark.asyncio
async def test_eager_module_cannot_import_lazy_module(container: Container) -> None:
    @module(imports=[ReportsModule], providers=[Database])
    class EagerImporter:
        pass

    with pytest.raises(EagerModuleCannotImportLazyModuleError) as exc_info:
        await init(container, EagerImporter)

    assert "EagerImporter" in str(exc_info.value)
    assert "ReportsModule" in str(exc_info.value)
    assert not container.has_module(EagerImporter)
    assert not container.has_module(ReportsModule)


@pytest.mark.asyncio
async def test_lazy_module_cannot_import_lazy_module(container: Container) -> None:
    @module(imports=[ReportsModule], lazy=LazyConfig(trigger="dashboards"))
    class LazyImporter:
        pass

    with pytest.raises(LazyModuleCannotImportLazyModuleError):
        await init(container, LazyImporter)


@pytest.mark.asyncio
async def test_import_without_descriptor_is_skipped(container: Container, caplog: pytest.LogCaptureFixture) -> None:
    class Undeclared:
        pass

    @module(imports=[Undeclared])
    class Importer:
        pass

    with caplog.at_level(logging.WARNING, logger="modular.di.registration"):
        await init(container, Importer)

    assert container.has_module(Importer)
    assert not container.has_module(Undeclared)
    assert "Undeclared" in caplog.text


@pytest.mark.asyncio
async def test_windows_and_ipc_handlers_are_registered(container: Container) -> None:
    @window_manager(hash="window:settings", options={"width": 400})
    class SettingsWindow:
        pass

    class NotAWindow:
        pass

    @ipc_handler()
    class SettingsIpc:
        pass

    @module(ipc=[SettingsIpc], windows=[SettingsWindow, NotAWindow])
    class SettingsModule:
        pass

    await init(container, SettingsModule)

    registration = container.get_provider(SettingsModule, "window:settings")
    assert isinstance(registration, WindowRegistration)
    assert registration.window_class is SettingsWindow
    assert registration.metadata.options == {"width": 400}
    assert container.get_provider(SettingsModule, NotAWindow) is None
    assert container.get_provider(SettingsModule, SettingsIpc) is SettingsIpc


@pytest.mark.asyncio
async def test_instantiate_module_injects_and_registers(container: Container) -> None:
    await init(container, AppModule)

    instance = await instantiate_module(container, AppModule)

    assert isinstance(instance.repository, Repository)
    assert instance.name == "app"
    assert await container.resolve(AppModule, AppModule) is instance
