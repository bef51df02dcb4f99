#!/usr/bin/env python3
"""
Demo of eager and lazy modules sharing a common import.
"""

import asyncio
import logging
from typing import Annotated

from modular.di import (
    Container,
    FactoryProvider,
    Inject,
    InjectionToken,
    LazyConfig,
    LocalIpcMain,
    ValueProvider,
    bootstrap_modules,
    ipc_handler,
    module,
)

DB_URL = InjectionToken("db-url")


class Database:
    def __init__(self, url: Annotated[str, Inject(DB_URL)]):
        self.url = url
        print(f"[DB] Connected to {url}")

    def query(self, sql: str) -> str:
        return f"{sql} @ {self.url}"


async def open_cache() -> dict[str, str]:
    await asyncio.sleep(0.01)
    print("[Cache] Warmed up")
    return {}


@module(
    providers=[
        ValueProvider(provide=DB_URL, use_value="sqlite:///demo.db"),
        Database,
        FactoryProvider(provide="cache", use_factory=open_cache),
    ],
    exports=[Database, "cache"],
)
class StorageModule:
    pass


class UserService:
    def __init__(self, db: Database):
        self.db = db

    def find(self, user_id: int) -> str:
        return self.db.query(f"SELECT * FROM users WHERE id = {user_id}")


@module(imports=[StorageModule], providers=[UserService])
class UsersModule:
    def __init__(self, users: UserService):
        print(f"[Users] {users.find(1)}")


@ipc_handler()
class ReportsIpc:
    def __init__(self, db: Database, cache: Annotated[dict, Inject("cache")]):
        self.db = db
        self.cache = cache

    async def on_init(self, params) -> None:
        self.cache["report"] = self.db.query("SELECT count(*) FROM users")
        print(f"[Reports] Ready: {self.cache['report']}")


@module(imports=[StorageModule], ipc=[ReportsIpc], lazy=LazyConfig(trigger="reports"))
class ReportsModule:
    pass


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    container = Container()
    ipc = LocalIpcMain()

    print("=== Bootstrap ===")
    result = await bootstrap_modules([UsersModule, ReportsModule], container=container, ipc=ipc)
    print(f"Eager modules: {[m.__name__ for m in result.modules]}")
    print(f"Lazy triggers: {list(result.lazy_gates)}")

    print("\n=== Triggering 'reports' twice concurrently ===")
    first, second = await asyncio.gather(ipc.invoke("reports"), ipc.invoke("reports"))
    print(f"Responses: {first} / {second}")


if __name__ == "__main__":
    asyncio.run(main())
