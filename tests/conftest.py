"""Shared pytest fixtures."""

import asyncio
import copy
import json
import re
from types import SimpleNamespace
from typing import Any
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from goaltracker.app import App
from goaltracker.config import Config
from goaltracker.core.modules.user.models import SessionUser
from goaltracker.web.server import create_fastapi_app

CSRF_META_RE = re.compile(r'<meta name="csrf-token" content="([^"]*)">')
PAGE_CONTEXT_RE = re.compile(r'<script type="application/json" id="page-context">(.*?)</script>', re.DOTALL)


# Fake storage: the subset of the async pymongo collection API the services use.
# Every operation yields to the event loop once before touching the data, so
# concurrent tasks interleave the way they would against a real server.


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        value = doc.get(key)
        if isinstance(condition, dict):
            for op, operand in condition.items():
                if op == "$gt":
                    ok = value is not None and value > operand
                elif op == "$gte":
                    ok = value is not None and value >= operand
                elif op == "$lt":
                    ok = value is not None and value < operand
                elif op == "$ne":
                    ok = value != operand
                elif op == "$in":
                    ok = value in operand
                else:
                    raise NotImplementedError(op)
                if not ok:
                    return False
        elif value != condition:
            return False
    return True


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is not None, value)


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str | list[tuple[str, int]], direction: int = 1) -> "FakeCursor":
        keys = [(key, direction)] if isinstance(key, str) else list(key)
        for name, order in reversed(keys):
            self._docs.sort(key=lambda doc, name=name: _sort_key(doc.get(name)), reverse=order < 0)
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        await asyncio.sleep(0)
        for doc in self._docs:
            yield copy.deepcopy(doc)


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self.indexes: list[tuple[Any, dict[str, Any]]] = []
        self.operations: list[str] = []

    async def _step(self, operation: str) -> None:
        self.operations.append(operation)
        await asyncio.sleep(0)

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        self.indexes.append((keys, kwargs))
        return str(keys)

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        await self._step("insert_one")
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query: dict[str, Any] | None = None) -> dict[str, Any] | None:
        await self._step("find_one")
        for doc in self.docs:
            if _matches(doc, query or {}):
                return copy.deepcopy(doc)
        return None

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        self.operations.append("find")
        return FakeCursor([doc for doc in self.docs if _matches(doc, query or {})])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        await self._step("update_one")
        for doc in self.docs:
            if _matches(doc, query):
                changes = copy.deepcopy(update["$set"])
                modified = any(doc.get(key) != value for key, value in changes.items())
                doc.update(changes)
                return SimpleNamespace(matched_count=1, modified_count=int(modified))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def replace_one(self, query: dict[str, Any], replacement: dict[str, Any], upsert: bool = False) -> None:
        await self._step("replace_one")
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                self.docs[index] = copy.deepcopy(replacement)
                return
        if upsert:
            self.docs.append(copy.deepcopy(replacement))

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        await self._step("delete_one")
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query: dict[str, Any]) -> SimpleNamespace:
        await self._step("delete_many")
        kept = [doc for doc in self.docs if not _matches(doc, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)

    async def count_documents(self, query: dict[str, Any]) -> int:
        await self._step("count_documents")
        return sum(1 for doc in self.docs if _matches(doc, query))


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection(name))


@pytest.fixture
def config():
    """Configuration for tests, no environment needed."""
    return Config(
        database_url="mongodb://localhost:27017/goaltracker_test",
        host="127.0.0.1",
        port=8000,
        debug=False,
        session_secret_key="test-session-secret",
        password_hash_rounds=4,
    )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
async def app(config, database):
    """A started App backed by the fake database."""
    app = App(config, database)
    async with app.lifespan():
        yield app


@pytest.fixture
def alice():
    return SessionUser(id=UUID("87654321-4321-8765-4321-876543218765"), email="alice@example.com", display_name="Alice")


@pytest.fixture
def bob():
    return SessionUser(id=UUID("12345678-1234-5678-1234-567812345678"), email="bob@example.com", display_name="Bob")


# HTTP helpers


@pytest.fixture
def fastapi_app(config, database):
    return create_fastapi_app(App(config, database), config)


@pytest.fixture
def client(fastapi_app):
    with TestClient(fastapi_app) as client:
        yield client


@pytest.fixture
def other_client(fastapi_app):
    """A second browser with its own cookie jar."""
    with TestClient(fastapi_app) as client:
        yield client


def csrf_token(response) -> str:
    match = CSRF_META_RE.search(response.text)
    assert match is not None, "page carries no CSRF token"
    return match.group(1)


def page_context(response) -> dict[str, Any]:
    match = PAGE_CONTEXT_RE.search(response.text)
    assert match is not None, "response is not a rendered page"
    return json.loads(match.group(1))


def register(client, email: str = "alice@example.com", display_name: str = "Alice", password: str = "s3cret-pass"):
    """Register through the form, which also logs the browser in."""
    token = csrf_token(client.get("/users/register"))
    response = client.post(
        "/users/register",
        data={"email": email, "display_name": display_name, "password": password, "_csrf": token},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return response


def login(client, email: str = "alice@example.com", password: str = "s3cret-pass"):
    token = csrf_token(client.get("/users/login"))
    return client.post(
        "/users/login", data={"email": email, "password": password, "_csrf": token}, follow_redirects=False
    )


def logout(client):
    token = csrf_token(client.get("/"))
    response = client.post("/users/logout", data={"_csrf": token}, follow_redirects=False)
    assert response.status_code == 303
    return response


def create_goal(client, title: str = "Run 5k", **fields: str) -> str:
    """Create a goal through the form and return its id."""
    token = csrf_token(client.get("/goals/new"))
    response = client.post("/goals", data={"title": title, "_csrf": token, **fields}, follow_redirects=False)
    assert response.status_code == 303
    return response.headers["location"].rsplit("/", 1)[-1]
