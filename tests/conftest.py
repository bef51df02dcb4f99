"""
Shared fixtures: every test gets its own container and IPC channel registry.
"""

import pytest

from modular.di import Container, LocalIpcMain


@pytest.fixture
def container() -> Container:
    return Container()


@pytest.fixture
def ipc() -> LocalIpcMain:
    return LocalIpcMain()
