# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

Directory fixtures mirror a small community: house-1 (head-user-1 with
member-user-1) and house-2 (head-user-2), plus one resident record for
house-1.
"""

import copy
from types import SimpleNamespace
from typing import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from core.session import Session
from core.store import DirectoryStore
from main import create_app
from models.auth import Identity


TS = {"seconds": 1640995200, "nanoseconds": 0}

USERS = {
    "head-user-1": {
        "id": "head-user-1",
        "phoneNumber": "9400722590",
        "role": "head",
        "houseId": "house-1",
        "createdAt": TS,
        "lastLoginAt": TS,
    },
    "member-user-1": {
        "id": "member-user-1",
        "phoneNumber": "9876543210",
        "role": "member",
        "houseId": "house-1",
        "createdAt": TS,
        "lastLoginAt": TS,
    },
    "head-user-2": {
        "id": "head-user-2",
        "phoneNumber": "9123456789",
        "role": "head",
        "houseId": "house-2",
        "createdAt": TS,
        "lastLoginAt": TS,
    },
}

HOUSES = {
    "house-1": {
        "id": "house-1",
        "houseNumber": "96A",
        "headOfFamilyId": "head-user-1",
        "memberIds": ["head-user-1", "member-user-1"],
        "createdAt": TS,
        "updatedAt": TS,
    },
    "house-2": {
        "id": "house-2",
        "houseNumber": "97",
        "headOfFamilyId": "head-user-2",
        "memberIds": ["head-user-2"],
        "createdAt": TS,
        "updatedAt": TS,
    },
}

RESIDENT_1 = {
    "id": "resident-1",
    "houseName": "Test House 1",
    "houseNumber": "96A",
    "street": "Test Street",
    "ownership": "owned",
    "floorType": "concrete",
    "totalFamilyMembers": "4",
    "headOfFamily": {
        "name": "John Doe",
        "phone": "9400722590",
        "occupation": "Engineer",
        "bloodGroup": "O+",
        "emergencyContact": {"name": "Jane Doe", "phone": "9876543210"},
    },
    "familyMembers": [],
    "permanentAddress": "Test Address",
    "ownerAddress": "Test Address",
    "houseId": "house-1",
    "createdBy": "head-user-1",
    "updatedBy": "head-user-1",
    "timestamp": TS,
}

# Verified phones as Supabase Auth issues them (no "+")
PHONES = {
    "head-user-1": "919400722590",
    "member-user-1": "919876543210",
    "head-user-2": "919123456789",
    "new-user": "919812345678",
}


# ============================================================
# In-memory stand-in for the Supabase table API
# ============================================================
class FakeQuery:
    def __init__(self, tables: dict, name: str):
        self._tables = tables
        self._name = name
        self._op = "select"
        self._payload = None
        self._filters = []
        self._limit = None
        self._order = None

    def select(self, *_args, **_kwargs):
        self._op = "select"
        return self

    def insert(self, payload, **_kwargs):
        self._op, self._payload = "insert", payload
        return self

    def update(self, payload):
        self._op, self._payload = "update", payload
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, field, value):
        self._filters.append((field, value))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def order(self, field, desc=False):
        self._order = (field, desc)
        return self

    def execute(self):
        rows = self._tables.setdefault(self._name, [])
        matched = [r for r in rows if all(r.get(f) == v for f, v in self._filters)]

        if self._op == "insert":
            rows.append(copy.deepcopy(self._payload))
            return SimpleNamespace(data=[copy.deepcopy(self._payload)])

        if self._op == "update":
            for r in matched:
                r.update(copy.deepcopy(self._payload))
            return SimpleNamespace(data=copy.deepcopy(matched))

        if self._op == "delete":
            self._tables[self._name] = [r for r in rows if r not in matched]
            return SimpleNamespace(data=copy.deepcopy(matched))

        if self._order:
            field, desc = self._order
            matched = sorted(matched, key=lambda r: r.get(field), reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]
        return SimpleNamespace(data=copy.deepcopy(matched))


class FakeSupabaseClient:
    def __init__(self, tables: dict):
        self.tables = tables
        self.auth = Mock()
        self.auth.get_user.side_effect = self._get_user

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables, name)

    def rows(self, name: str) -> list:
        return self.tables.get(name, [])

    def row(self, name: str, doc_id: str):
        return next((r for r in self.rows(name) if r.get("id") == doc_id), None)

    # Bearer tokens in tests are "token-<uid>"
    def _get_user(self, token: str):
        if not token.startswith("token-"):
            raise Exception("invalid JWT")
        uid = token[len("token-"):]
        return SimpleNamespace(user=SimpleNamespace(id=uid, phone=PHONES.get(uid)))


# ============================================================
# Fixtures
# ============================================================
@pytest.fixture
def tables() -> dict:
    return {
        "users": copy.deepcopy(list(USERS.values())),
        "houses": copy.deepcopy(list(HOUSES.values())),
        "residents": [copy.deepcopy(RESIDENT_1)],
    }


@pytest.fixture
def fake_client(tables) -> FakeSupabaseClient:
    return FakeSupabaseClient(tables)


@pytest.fixture
def store_for(fake_client):
    """Build a rule-enforcing store bound to a given uid (None = anonymous)."""
    def _make(uid=None) -> DirectoryStore:
        return DirectoryStore(fake_client, uid)
    return _make


@pytest.fixture
def session_for(store_for):
    """Open a session for a uid against the fake directory."""
    def _make(uid: str) -> Session:
        identity = Identity(uid=uid, phone=PHONES.get(uid))
        return Session.open(identity, store_for(uid), record_login=False)
    return _make


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app, fake_client, monkeypatch) -> Generator[TestClient, None, None]:
    """Test client wired to the in-memory directory."""
    monkeypatch.setattr("dependencies.auth.get_supabase_client", lambda: fake_client)
    monkeypatch.setattr("routers.auth.get_supabase_client", lambda: fake_client)
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(uid: str) -> dict:
    return {"Authorization": f"Bearer token-{uid}"}
