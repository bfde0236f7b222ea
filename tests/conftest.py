# tests/conftest.py
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.core.config import Settings
from app.core.email_client import Mailer
from app.main import create_app

JWT_SECRET = "test-jwt-secret"


class FakeQuery:
    """
    Minimal stand-in for a postgrest request builder.

    Supports the filters the repositories use; every call returns self
    until `execute()`.
    """

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.access_token = db.access_token
        self.table = table
        self.filters = []
        self.action = "select"
        self.payload = None
        self.on_conflict = None
        self.order_by = None
        self.max_rows = None

    # --- actions ---
    def select(self, *_columns):
        self.action = "select"
        return self

    def insert(self, row):
        self.action, self.payload = "insert", row
        return self

    def upsert(self, row, on_conflict=None):
        self.action, self.payload, self.on_conflict = "upsert", row, on_conflict
        return self

    def delete(self):
        self.action = "delete"
        return self

    # --- filters ---
    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def ilike(self, column, value):
        self.filters.append(lambda r: str(r.get(column, "")).lower() == value.lower())
        return self

    def gt(self, column, value):
        self.filters.append(lambda r: str(r.get(column)) > value)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def execute(self):
        self.db.calls.append((self.table, self.action, self.payload))
        self.db.requests.append((self.table, self.action, self.access_token))
        error = self.db.errors.get((self.table, self.action))
        if error is not None:
            raise error

        rows = self.db.tables.setdefault(self.table, [])
        if self.action == "insert":
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[self.payload])
        if self.action == "upsert":
            key = self.on_conflict
            rows[:] = [r for r in rows if r.get(key) != self.payload.get(key)]
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[self.payload])

        matched = [r for r in rows if all(f(r) for f in self.filters)]
        if self.action == "delete":
            rows[:] = [r for r in rows if r not in matched]
            return SimpleNamespace(data=matched)

        if self.order_by:
            column, desc = self.order_by
            matched.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self.max_rows is not None:
            matched = matched[: self.max_rows]
        return SimpleNamespace(data=[dict(r) for r in matched])


class FakeSupabase:
    """
    In-memory tables + a MagicMock auth API.

    `scoped(token)` plays the per-request client: it shares the tables,
    error injection and call logs, records the token on every table call,
    and uses `scoped_auth` as its auth API.
    """

    def __init__(self, access_token=None, parent=None):
        self.access_token = access_token
        self.options = SimpleNamespace(headers={"Authorization": "Bearer anon-key"})
        if parent is None:
            self.tables: dict[str, list[dict]] = {}
            self.errors: dict[tuple[str, str], Exception] = {}
            self.calls: list[tuple] = []
            self.requests: list[tuple] = []
            self.auth = MagicMock(name="auth")
            self.auth.get_session.return_value = None
            self.auth.get_user.return_value = None
            self.scoped_auth = MagicMock(name="scoped_auth")
            self.scoped_auth.verify_otp.return_value = None
            self.scoped_clients: list["FakeSupabase"] = []
        else:
            self.tables = parent.tables
            self.errors = parent.errors
            self.calls = parent.calls
            self.requests = parent.requests
            self.auth = parent.scoped_auth
            self.options.headers["Authorization"] = f"Bearer {access_token or 'anon-key'}"

    def scoped(self, access_token=None) -> "FakeSupabase":
        client = FakeSupabase(access_token, parent=self)
        self.scoped_clients.append(client)
        return client

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


def make_user(user_id="user-1", email="ada@example.com", **metadata):
    return SimpleNamespace(id=user_id, email=email, user_metadata=metadata)


def make_session(user=None, expires_at=None):
    return SimpleNamespace(user=user, expires_at=expires_at)


def make_token(sub="user-1", email="ada@example.com", secret=JWT_SECRET, minutes=30):
    claims = {
        "sub": sub,
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def settings():
    return Settings(
        SUPABASE_URL="https://test.supabase.co",
        SUPABASE_KEY="anon-key",
        SUPABASE_JWT_SECRET=JWT_SECRET,
        APP_URL="https://nimart.ng",
    )


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def mailer():
    return MagicMock(spec=Mailer)


@pytest.fixture
def app(settings, supabase, mailer):
    return create_app(
        settings=settings,
        supabase=supabase,
        mailer=mailer,
        client_factory=supabase.scoped,
    )


@pytest.fixture
def client(app):
    return TestClient(app)
