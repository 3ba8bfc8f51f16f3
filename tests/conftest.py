# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides an in-memory stand-in for the Supabase client (tables,
#   storage buckets, auth) so services run their real query chains
# - Provides an admin override for the FastAPI test client
# =============================================================================

import os
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("SITE_URL", "https://ds-capture.test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import SupabaseClient

# Tables whose primary key is a bigint identity column
INT_ID_TABLES = {"posts", "contact_messages", "activity_logs"}

ADMIN_ID = "11111111-2222-3333-4444-555555555555"
ADMIN_EMAIL = "owner@ds-capture.test"


# =============================================================================
# In-Memory Supabase
# =============================================================================

class FakeQueryError(Exception):
    """Raised by a fake table configured to fail."""


class FakeQuery:
    """Records a fluent query chain and runs it against FakeDatabase on execute()."""

    def __init__(self, db: "FakeDatabase", table: str):
        self.db = db
        self.table = table
        self.operation = "select"
        self.columns: list[str] | None = None
        self.payload: Any = None
        self.on_conflict: str | None = None
        self.filters: list = []
        self.orders: list[tuple[str, bool, bool | None]] = []
        self.limit_count: int | None = None

    # --- builders -----------------------------------------------------------

    def select(self, columns: str = "*"):
        if columns.strip() != "*":
            self.columns = [column.strip() for column in columns.split(",") if column.strip()]
        return self

    def insert(self, data):
        self.operation, self.payload = "insert", data
        return self

    def update(self, data):
        self.operation, self.payload = "update", data
        return self

    def upsert(self, data, on_conflict: str | None = None, **kwargs):
        self.operation, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def is_(self, column, value):
        expected = None if value in (None, "null") else value
        self.filters.append(lambda row: row.get(column) is expected)
        return self

    def order(self, column, desc: bool = False, nullsfirst: bool | None = None):
        self.orders.append((column, desc, nullsfirst))
        return self

    def limit(self, count: int):
        self.limit_count = count
        return self

    def maybe_single(self):
        return self

    def single(self):
        return self

    # --- execution ----------------------------------------------------------

    def _matches(self, row: dict) -> bool:
        return all(check(row) for check in self.filters)

    def _project(self, row: dict) -> dict:
        if self.columns is None:
            return dict(row)
        return {column: row[column] for column in self.columns if column in row}

    def execute(self):
        if self.table in self.db.failing_tables:
            raise FakeQueryError(f"{self.table} unavailable")

        self.db.calls.append((self.table, self.operation))
        handler = getattr(self, f"_run_{self.operation}")
        return SimpleNamespace(data=handler())

    def _run_select(self) -> list[dict]:
        rows = [row for row in self.db.rows(self.table) if self._matches(row)]
        for column, desc, nullsfirst in reversed(self.orders):
            # Postgres default: NULLS LAST ascending, NULLS FIRST descending
            nulls_first = desc if nullsfirst is None else nullsfirst
            present = [row for row in rows if row.get(column) is not None]
            missing = [row for row in rows if row.get(column) is None]
            present.sort(key=lambda row: row.get(column), reverse=desc)
            rows = missing + present if nulls_first else present + missing
        if self.limit_count is not None:
            rows = rows[:self.limit_count]
        return [self._project(row) for row in rows]

    def _run_insert(self) -> list[dict]:
        items = self.payload if isinstance(self.payload, list) else [self.payload]
        return [dict(self.db.add(self.table, item)) for item in items]

    def _run_update(self) -> list[dict]:
        updated = []
        for row in self.db.rows(self.table):
            if self._matches(row):
                row.update(self.payload)
                updated.append(dict(row))
        return updated

    def _run_upsert(self) -> list[dict]:
        items = self.payload if isinstance(self.payload, list) else [self.payload]
        keys = [key.strip() for key in (self.on_conflict or "id").split(",")]
        result = []
        for item in items:
            existing = next(
                (
                    row for row in self.db.rows(self.table)
                    if all(key in item and row.get(key) == item[key] for key in keys)
                ),
                None,
            )
            if existing is not None:
                existing.update(item)
                result.append(dict(existing))
            else:
                result.append(dict(self.db.add(self.table, item)))
        return result

    def _run_delete(self) -> list[dict]:
        table = self.db.rows(self.table)
        deleted = [row for row in table if self._matches(row)]
        self.db.tables[self.table] = [row for row in table if not self._matches(row)]
        return [dict(row) for row in deleted]


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path: str, file: bytes, file_options: dict | None = None):
        if self.name in self.storage.failing_buckets:
            raise FakeQueryError(f"bucket {self.name} rejected upload")
        self.storage.objects.setdefault(self.name, {})[path] = file
        return SimpleNamespace(path=path)

    def get_public_url(self, path: str) -> str:
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths: list[str]):
        bucket = self.storage.objects.setdefault(self.name, {})
        self.storage.removed.append((self.name, list(paths)))
        for path in paths:
            bucket.pop(path, None)
        return [{"name": path} for path in paths]


class FakeStorage:
    def __init__(self):
        self.objects: dict[str, dict[str, bytes]] = {}
        self.removed: list[tuple[str, list[str]]] = []
        self.failing_buckets: set[str] = set()

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)

    def list_buckets(self):
        return [SimpleNamespace(name=name) for name in self.objects]

    def files(self, bucket: str) -> dict[str, bytes]:
        return self.objects.get(bucket, {})


class FakeAuth:
    """Supabase Auth with one known user."""

    def __init__(self):
        self.users = {ADMIN_EMAIL: ("correct-password", ADMIN_ID)}
        self.reset_requests: list[tuple[str, dict]] = []

    def sign_in_with_password(self, credentials: dict):
        entry = self.users.get(credentials["email"])
        if entry is None or entry[0] != credentials["password"]:
            raise FakeQueryError("Invalid login credentials")
        return SimpleNamespace(
            user=SimpleNamespace(id=entry[1], email=credentials["email"]),
            session=SimpleNamespace(access_token="access-token", refresh_token="refresh-token", expires_in=3600),
        )

    def reset_password_for_email(self, email: str, options: dict | None = None):
        self.reset_requests.append((email, options or {}))


class FakeDatabase:
    """Tables as lists of dicts, plus storage and auth, shaped like supabase.Client."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self.failing_tables: set[str] = set()
        self.storage = FakeStorage()
        self.auth = FakeAuth()
        self._next_int_id = 1

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> list[dict]:
        return self.tables.setdefault(name, [])

    def add(self, name: str, item: dict) -> dict:
        row = dict(item)
        if "id" not in row:
            if name in INT_ID_TABLES:
                row["id"] = self._next_int_id
                self._next_int_id += 1
            else:
                row["id"] = str(uuid.uuid4())
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.rows(name).append(row)
        return row

    def seed(self, name: str, *items: dict) -> list[dict]:
        return [self.add(name, item) for item in items]

    def actions(self) -> list[str]:
        """Activity log actions in insertion order."""
        return [row["action"] for row in self.rows("activity_logs")]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db():
    """Install a fresh in-memory Supabase as both service and auth client."""
    db = FakeDatabase()
    SupabaseClient._instance = db
    SupabaseClient._auth_instance = db
    yield db
    SupabaseClient.reset()


@pytest.fixture
def admin_user():
    from app.auth.models import AdminUser

    return AdminUser(id=uuid.UUID(ADMIN_ID), email=ADMIN_EMAIL, role="admin")


@pytest.fixture
def actor(admin_user):
    return admin_user.as_actor()


@pytest.fixture
def image_factory():
    """Build UploadedImage instances."""
    from core.models.common import UploadedImage

    def _make(filename: str = "photo.jpg", content: bytes = b"\xff\xd8\xffimage", content_type: str = "image/jpeg"):
        return UploadedImage(filename=filename, content=content, content_type=content_type)

    return _make


@pytest.fixture
def client(fake_db):
    """TestClient without authentication."""
    from fastapi.testclient import TestClient

    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(fake_db, admin_user):
    """TestClient whose requests pass the admin check."""
    from fastapi.testclient import TestClient

    from app.auth.dependencies import get_current_admin
    from app.main import app

    app.dependency_overrides[get_current_admin] = lambda: admin_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_current_admin, None)
