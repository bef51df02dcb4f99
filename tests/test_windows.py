"""
Tests for the window-factory handoff given to IPC handlers.
"""

import pytest

from modular.di import Container, LocalIpcMain, WindowOptions, bootstrap_modules, ipc_handler, module, window_manager


class Theme:
    pass


class FakeWindowHost:
    def __init__(self):
        self.created: list[tuple[WindowOptions, object]] = []
        self.attached: list[tuple[object, object]] = []

    def create_window(self, options, params):
        handle = {"hash": options.hash, "params": params}
        self.created.append((options, params))
        return handle

    def attach_listeners(self, window, manager):
        self.attached.append((window, manager))


@window_manager(hash="window:main", is_cache=True, options={"width": 800})
class MainWindow:
    def __init__(self, theme: Theme):
        self.theme = theme


captured: dict[str, object] = {}


@ipc_handler()
class MainIpc:
    def on_init(self, params) -> None:
        captured["get_window"] = params.get_window


@module(providers=[Theme], ipc=[MainIpc], windows=[MainWindow])
class MainModule:
    pass


@pytest.fixture(autouse=True)
def reset_captured():
    captured.clear()
    yield
    captured.clear()


@pytest.mark.asyncio
async def test_factory_creates_window_and_manager(container: Container, ipc: LocalIpcMain) -> None:
    host = FakeWindowHost()
    await bootstrap_modules([MainModule], container=container, ipc=ipc, window_host=host)

    factory = captured["get_window"]("window:main")
    window = await factory.create({"query": "tab=1"})

    assert window == {"hash": "window:main", "params": {"query": "tab=1"}}
    options, params = host.created[0]
    assert options.is_cache
    assert options.options == {"width": 800}
    attached_window, manager = host.attached[0]
    assert attached_window is window
    assert isinstance(manager, MainWindow)
    assert manager.theme is await container.resolve(MainModule, Theme)


@pytest.mark.asyncio
async def test_unknown_or_missing_name_creates_nothing(container: Container, ipc: LocalIpcMain) -> None:
    host = FakeWindowHost()
    await bootstrap_modules([MainModule], container=container, ipc=ipc, window_host=host)
    get_window = captured["get_window"]

    assert await get_window(None).create() is None
    assert await get_window("window:unknown").create() is None
    assert host.created == []


@pytest.mark.asyncio
async def test_without_host_creates_nothing(container: Container, ipc: LocalIpcMain) -> None:
    await bootstrap_modules([MainModule], container=container, ipc=ipc)

    assert await captured["get_window"]("window:main").create() is None


@pytest.mark.asyncio
async def test_local_ipc_rejects_second_handler(ipc: LocalIpcMain) -> None:
    async def handler() -> str:
        return "ok"

    ipc.handle("ping", handler)

    with pytest.raises(ValueError):
        ipc.handle("ping", handler)

    assert await ipc.invoke("ping") == "ok"

    ipc.remove_handler("ping")

    with pytest.raises(LookupError):
        await ipc.invoke("ping")
