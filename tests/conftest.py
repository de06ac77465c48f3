# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import os

os.environ.setdefault("ENV", "test")

import uuid
from typing import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from main import create_app
from dependencies.auth import get_current_actor
from models.actor import AdminActor, GuardActor


# ------------------------------------------------------------------
# In-memory stand-in for the Supabase client (tables + rpc)
# ------------------------------------------------------------------
class FakeQuery:
    def __init__(self, rows: list):
        self.rows = rows
        self.filters = []
        self.op = "select"
        self.payload = None

    def select(self, *args, **kwargs):
        self.op = "select"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, *args, **kwargs):
        return self

    def limit(self, *args, **kwargs):
        return self

    def insert(self, data, **kwargs):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        if self.op == "insert":
            row = {"id": str(uuid.uuid4()), **self.payload}
            self.rows.append(row)
            return Mock(data=[dict(row)])

        matched = [row for row in self.rows if self._matches(row)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
        elif self.op == "delete":
            for row in matched:
                self.rows.remove(row)

        return Mock(data=[dict(row) for row in matched])


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.auth = Mock()
        self.rpc = Mock(side_effect=self._rpc)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, []))

    def _rpc(self, name, params):
        # Mirrors database/functions.sql
        assert name == "approve_pending_admin"
        requests = self.tables.setdefault("pending_admins", [])
        request = next((r for r in requests if r["id"] == params["p_request_id"]), None)
        if request is None:
            raise Exception(f"pending admin request {params['p_request_id']} not found")
        if request["status"] != "pending":
            raise Exception(
                f"pending admin request {params['p_request_id']} already resolved ({request['status']})"
            )

        admin = {**params["p_admin"], "is_active": True}
        self.tables.setdefault("admins", []).append(admin)
        request.update({
            "status": "approved",
            "resolved_by": params["p_approved_by"],
            "admin_id": admin["id"],
        })
        return Mock(execute=Mock(return_value=Mock(data=dict(admin))))


@pytest.fixture
def fake_supabase():
    """Create an in-memory Supabase client."""
    return FakeSupabase()


ROUTER_MODULES = (
    "routers.auth",
    "routers.signup",
    "routers.admins",
    "routers.pending_admins",
    "routers.projects",
    "routers.guards",
)


@pytest.fixture
def api_store(fake_supabase, monkeypatch):
    """Route every router's Supabase client to the in-memory store."""
    for module in ROUTER_MODULES:
        monkeypatch.setattr(f"{module}.get_supabase_client", lambda: fake_supabase)
    return fake_supabase


# ------------------------------------------------------------------
# App / client
# ------------------------------------------------------------------
@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def as_actor(app):
    """Make every request run as the given actor (or None)."""
    def _set(actor):
        app.dependency_overrides[get_current_actor] = lambda: actor
    yield _set
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
def reset_rate_limits():
    from core.rate_limiter import reset_rate_limits as _reset
    _reset()
    yield
    _reset()


# ------------------------------------------------------------------
# Actors
# ------------------------------------------------------------------
@pytest.fixture
def super_admin():
    return AdminActor(id="super-1", account_type="super_admin")


@pytest.fixture
def full_access_admin():
    return AdminActor(
        id="full-1",
        account_type="full_access",
        assigned_projects={"A", "B"},
    )


@pytest.fixture
def custom_admin():
    return AdminActor(
        id="custom-1",
        account_type="custom",
        assigned_projects={"B"},
        permissions={"news": ["read"]},
    )


@pytest.fixture
def guard():
    return GuardActor(id="guard-1", project_id="P1")
