"""Shared pytest fixtures and an in-memory async driver for mongochan tests.

``FakeAsyncClient`` exposes the slice of PyMongo's async API mongochan
uses (``get_database``/``get_collection``, async collection operations,
chainable cursors with async ``to_list``/``explain``) on top of mongomock,
so no server is needed.
"""

from __future__ import annotations

import asyncio
import logging
import queue
import uuid
from collections.abc import Callable, Generator
from typing import Any

import mongomock
import pytest
from bson import ObjectId
from click.testing import CliRunner

from mongochan.config.discovery import CONFIG_ENV_VAR
from mongochan.errors import OperationError
from mongochan.infrastructure.connection import Connection, close, connect
from mongochan.services.handle import CompletionHandle
from mongochan.services.result import CommandResult
from mongochan.services.telemetry import disable_telemetry

TIMEOUT = 5.0


# ---------------------------------------------------------------------------
# Async driver double
# ---------------------------------------------------------------------------


class FakeCursor:
    """Chainable cursor with async terminal operations."""

    def __init__(self, cursor: Any, namespace: str, query: Any) -> None:
        self._cursor = cursor
        self._namespace = namespace
        self._query = query
        self.modifiers: list[tuple[str, Any]] = []

    def sort(self, keys: list[tuple[str, int]]) -> FakeCursor:
        self.modifiers.append(("sort", keys))
        self._cursor = self._cursor.sort(keys)
        return self

    def skip(self, n: int) -> FakeCursor:
        self.modifiers.append(("skip", n))
        self._cursor = self._cursor.skip(n)
        return self

    def limit(self, n: int) -> FakeCursor:
        self.modifiers.append(("limit", n))
        self._cursor = self._cursor.limit(n)
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        await asyncio.sleep(0)
        docs = list(self._cursor)
        return docs if length is None else docs[:length]

    async def explain(self) -> dict[str, Any]:
        await asyncio.sleep(0)
        return {
            "queryPlanner": {
                "namespace": self._namespace,
                "parsedQuery": self._query or {},
                "winningPlan": {"stage": "COLLSCAN"},
            },
            "ok": 1.0,
        }


class FakeCollection:
    """Async wrapper over a mongomock collection that records driver calls."""

    def __init__(self, collection: Any) -> None:
        self._collection = collection
        self.calls: list[str] = []
        self.cursors: list[FakeCursor] = []
        self._failure: BaseException | None = None

    @property
    def name(self) -> str:
        return str(self._collection.name)

    def fail_next(self, exc: BaseException) -> None:
        """Make the next async operation raise *exc*."""
        self._failure = exc

    async def _enter(self, call: str) -> None:
        self.calls.append(call)
        await asyncio.sleep(0)
        if self._failure is not None:
            exc, self._failure = self._failure, None
            raise exc

    async def insert_one(self, document: Any) -> Any:
        await self._enter("insert_one")
        document.setdefault("_id", ObjectId())
        return self._collection.insert_one(document)

    async def insert_many(self, documents: list[Any]) -> Any:
        await self._enter("insert_many")
        for document in documents:
            document.setdefault("_id", ObjectId())
        return self._collection.insert_many(documents)

    def find(self, filter: Any = None, projection: Any = None) -> FakeCursor:  # noqa: A002
        self.calls.append("find")
        cursor = FakeCursor(self._collection.find(filter, projection), self.name, filter)
        self.cursors.append(cursor)
        return cursor

    async def count_documents(self, filter: Any) -> int:  # noqa: A002
        await self._enter("count_documents")
        return self._collection.count_documents(filter)

    async def delete_one(self, filter: Any) -> Any:  # noqa: A002
        await self._enter("delete_one")
        return self._collection.delete_one(filter)

    async def delete_many(self, filter: Any) -> Any:  # noqa: A002
        await self._enter("delete_many")
        return self._collection.delete_many(filter)

    async def replace_one(self, filter: Any, replacement: Any, upsert: bool = False) -> Any:  # noqa: A002
        await self._enter("replace_one")
        return self._collection.replace_one(filter, replacement, upsert=upsert)

    async def drop(self) -> None:
        await self._enter("drop")
        self._collection.drop()


class FakeDatabase:
    def __init__(self, database: Any) -> None:
        self._database = database
        self._collections: dict[str, FakeCollection] = {}

    @property
    def name(self) -> str:
        return str(self._database.name)

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(self._database.get_collection(name))
        return self._collections[name]


class FakeAsyncClient:
    """Stand-in for ``pymongo.AsyncMongoClient``."""

    def __init__(self) -> None:
        self._client = mongomock.MongoClient()
        self._databases: dict[str, FakeDatabase] = {}
        self.close_calls = 0

    def get_database(self, name: str) -> FakeDatabase:
        if name not in self._databases:
            self._databases[name] = FakeDatabase(self._client.get_database(name))
        return self._databases[name]

    async def close(self) -> None:
        self.close_calls += 1


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_client() -> FakeAsyncClient:
    return FakeAsyncClient()


@pytest.fixture
def db_name() -> str:
    return f"test-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def conn(fake_client: FakeAsyncClient, db_name: str) -> Generator[Connection]:
    """Open connection backed by the in-memory driver."""
    connection = connect(db_name, client=fake_client)
    try:
        yield connection
    finally:
        close(connection)


@pytest.fixture
def users(conn: Connection) -> FakeCollection:
    """The driver-side ``users`` collection, for seeding and call assertions."""
    return conn.collection("users")


@pytest.fixture
def via_callback() -> Callable[..., tuple[Any, OperationError | None]]:
    """Run a command in callback mode and return what the callback received."""

    def run(op: Callable[..., Any], *args: Any, **kwargs: Any) -> tuple[Any, OperationError | None]:
        box: queue.Queue[tuple[Any, OperationError | None]] = queue.Queue(maxsize=1)
        returned = op(*args, lambda value, error: box.put((value, error)), **kwargs)
        assert returned is None
        return box.get(timeout=TIMEOUT)

    return run


@pytest.fixture
def via_handle() -> Callable[..., CommandResult]:
    """Run a command in handle mode and wait for its result."""

    def run(op: Callable[..., Any], *args: Any, **kwargs: Any) -> CommandResult:
        handle = op(*args, **kwargs)
        assert isinstance(handle, CompletionHandle)
        return handle.wait(timeout=TIMEOUT)

    return run


@pytest.fixture
def seed_family(users: FakeCollection) -> list[dict[str, Any]]:
    """Insert John (40), Jane (38), and Johnny (6) straight through mongomock."""
    people = [
        {"name": "John", "age": 40},
        {"name": "Jane", "age": 38},
        {"name": "Johnny", "age": 6},
    ]
    users._collection.insert_many([dict(p) for p in people])
    return people


@pytest.fixture(autouse=True)
def _isolate_global_state() -> Generator[None]:
    """Undo logging and telemetry switches flipped by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    root_level = root.level
    mc = logging.getLogger("mongochan")
    mc_level = mc.level
    yield
    root.handlers = handlers
    root.setLevel(root_level)
    mc.setLevel(mc_level)
    disable_telemetry()


@pytest.fixture
def cli_db(
    monkeypatch: pytest.MonkeyPatch, fake_client: FakeAsyncClient, db_name: str
) -> FakeDatabase:
    """Route the CLI's connection to the in-memory driver; returns the database."""

    def open_fake(settings: Any) -> Connection:
        return connect(settings.connection.database, client=fake_client)

    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr("mongochan.commands._context.open_connection", open_fake)
    return fake_client.get_database(db_name)
