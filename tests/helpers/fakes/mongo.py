"""In-memory stand-in for ``AsyncMongoClient``.

A ``FakeMongoServer`` holds the behavior shared by every client it hands out;
tests patch ``healthcheck.checkers.mongo.AsyncMongoClient`` with
``server.connect``.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

from pymongo.errors import ServerSelectionTimeoutError


@dataclass
class FakeMongoServer:
    databases: dict[str, set[str]] = field(default_factory=dict)
    ping_error: Exception | None = None
    ping_delay: float = 0.0
    list_error: Exception | None = None
    list_delay: float = 0.0
    close_error: Exception | None = None
    close_delay: float = 0.0
    connect_error: Exception | None = None
    clients: list["FakeAsyncMongoClient"] = field(default_factory=list)
    commands: list[str] = field(default_factory=list)
    list_filters: list[dict[str, Any]] = field(default_factory=list)

    def connect(self, uri: str, **options: Any) -> "FakeAsyncMongoClient":
        if self.connect_error is not None:
            raise self.connect_error
        client = FakeAsyncMongoClient(self, uri, options)
        self.clients.append(client)
        return client

    def unreachable(self) -> None:
        self.ping_error = ServerSelectionTimeoutError("fake:27017: [Errno 111] Connection refused")

    @property
    def last_client(self) -> "FakeAsyncMongoClient":
        return self.clients[-1]


class FakeDatabase:
    def __init__(self, server: FakeMongoServer, name: str) -> None:
        self._server = server
        self.name = name

    async def command(self, command: str, **kwargs: Any) -> dict[str, Any]:
        self._server.commands.append(command)
        if self._server.ping_delay:
            await asyncio.sleep(self._server.ping_delay)
        if self._server.ping_error is not None:
            raise self._server.ping_error
        return {"ok": 1}

    async def list_collection_names(self, filter: dict[str, Any] | None = None, **kwargs: Any) -> list[str]:
        self._server.list_filters.append(filter or {})
        if self._server.list_delay:
            await asyncio.sleep(self._server.list_delay)
        if self._server.list_error is not None:
            raise self._server.list_error
        names = sorted(self._server.databases.get(self.name, set()))
        if filter and "name" in filter:
            names = [n for n in names if n == filter["name"]]
        return names


class FakeAsyncMongoClient:
    def __init__(self, server: FakeMongoServer, uri: str, options: dict[str, Any]) -> None:
        self._server = server
        self.uri = uri
        self.options = options
        self.close_calls = 0

    @property
    def admin(self) -> FakeDatabase:
        return FakeDatabase(self._server, "admin")

    def __getitem__(self, name: str) -> FakeDatabase:
        return FakeDatabase(self._server, name)

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    async def close(self) -> None:
        self.close_calls += 1
        if self._server.close_delay:
            await asyncio.sleep(self._server.close_delay)
        if self._server.close_error is not None:
            raise self._server.close_error
