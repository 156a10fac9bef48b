# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - InMemorySupabase: a stand-in for lib.supabase_client.SupabaseClient that
#   keeps tables and buckets in dicts and records every call
# - Fixtures for stores, services and a TestClient with the admin signed in
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# app.main builds the application at import time

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key-0123456789abcdef")
os.environ.setdefault("ADMIN_EMAIL", "admin@acfruit.com")
os.environ.setdefault("ADMIN_PASSWORD", "admin123")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import itertools
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.dependencies import build_services
from app.main import create_app
from core.stores import build_stores
from lib.supabase_client import SupabaseClientError


# =============================================================================
# In-Memory Supabase
# =============================================================================

class InMemorySupabase:
    """
    Same public methods as SupabaseClient, backed by dicts.

    Set `fail_on` to a method name (or a set of names) to make those calls
    raise SupabaseClientError. Every call is appended to `calls` as
    (method, args) so tests can assert that nothing was sent.
    """

    url = "https://test-project.supabase.co"

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None):
        self.tables: dict[str, list[dict[str, Any]]] = {
            "fruits": [],
            "news": [],
            "events": [],
            "planifruits": [],
            "appearance": [],
        }
        for name, rows in (tables or {}).items():
            self.tables[name] = [dict(row) for row in rows]

        self.buckets: dict[str, dict[str, bytes]] = {"images": {}, "documents": {}, "videos": {}}
        self.calls: list[tuple[str, tuple]] = []
        self.fail_on: set[str] = set()
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _call(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.fail_on:
            raise SupabaseClientError(f"{method} failed", code="TEST_FAILURE")

    def calls_to(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]

    def _tick(self) -> str:
        self._clock += timedelta(minutes=1)
        return self._clock.isoformat()

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def select_rows(self, table, order_by=None, desc=False, limit=None):
        self._call("select_rows", table, order_by, desc)
        rows = [dict(row) for row in self.tables[table]]
        if order_by:
            rows.sort(key=lambda row: str(row.get(order_by) or ""), reverse=desc)
        if limit is not None:
            rows = rows[:limit]
        return rows

    def select_first(self, table, columns="*"):
        self._call("select_first", table, columns)
        rows = self.tables[table]
        if not rows:
            return None
        if columns == "id":
            return {"id": rows[0]["id"]}
        return dict(rows[0])

    def count_rows(self, table):
        self._call("count_rows", table)
        return len(self.tables[table])

    def insert_row(self, table, data):
        self._call("insert_row", table, data)
        row = {"id": str(next(self._ids)), "created_at": self._tick(), **data}
        self.tables[table].append(row)
        return dict(row)

    def update_row(self, table, row_id, data):
        self._call("update_row", table, row_id, data)
        for row in self.tables[table]:
            if str(row["id"]) == str(row_id):
                row.update(data)
                return dict(row)
        return None

    def delete_row(self, table, row_id):
        self._call("delete_row", table, row_id)
        self.tables[table] = [row for row in self.tables[table] if str(row["id"]) != str(row_id)]

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    def upload_file(self, bucket, path, content, content_type):
        self._call("upload_file", bucket, path, content_type)
        self.buckets[bucket][path] = content
        return path

    def get_public_url(self, bucket, path):
        return f"{self.url}/storage/v1/object/public/{bucket}/{path}"

    def remove_files(self, bucket, paths):
        self._call("remove_files", bucket, paths)
        for path in paths:
            self.buckets[bucket].pop(path, None)

    def list_buckets(self):
        self._call("list_buckets")
        return list(self.buckets)


# =============================================================================
# Row Factories
# =============================================================================

def fruit_row(variety_id: str, category: str, name: str, **columns: Any) -> dict[str, Any]:
    return {
        "id": variety_id,
        "category": category,
        "type": None,
        "name": name,
        "description": f"Description de {name}",
        "image": f"https://cdn.test/{variety_id}.jpg",
        "images": [],
        "created_at": "2024-01-01T00:00:00+00:00",
        **columns,
    }


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        SUPABASE_URL="https://test-project.supabase.co",
        SUPABASE_ANON_KEY="test-anon-key-0123456789abcdef",
        ADMIN_EMAIL="admin@acfruit.com",
        ADMIN_PASSWORD="admin123",
    )


@pytest.fixture
def db() -> InMemorySupabase:
    return InMemorySupabase()


@pytest.fixture
def stores(db):
    return build_stores(db)


@pytest.fixture
def services(settings, db):
    return build_services(settings, db=db)


@pytest.fixture
def client(settings, services):
    """TestClient for a fresh application; startup loads the stores."""
    app = create_app(settings=settings, services=services)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    """TestClient with the admin signed in."""
    response = client.post(
        "/api/v1/admin/login",
        json={"email": "admin@acfruit.com", "password": "admin123"},
    )
    assert response.status_code == 200
    return client
