# tests/conftest.py
from __future__ import annotations

import os
import tempfile

import pytest

# Settings are read at import time, so the throwaway database must be
# configured before anything under fireaudit is imported.
_DB_DIR = tempfile.mkdtemp(prefix="fireaudit-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["APP_ENV"] = "test"
os.environ["AUTH_MODE"] = "dev"

from fastapi.testclient import TestClient  # noqa: E402

from fireaudit.db import Base, engine, init_db  # noqa: E402
from fireaudit.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_db():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def _headers(email: str, role: str) -> dict[str, str]:
    return {"X-User-Email": email, "X-User-Role": role}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return _headers("admin@test.local", "admin")


@pytest.fixture
def inspector_headers() -> dict[str, str]:
    return _headers("inspector@test.local", "inspector")


@pytest.fixture
def viewer_headers() -> dict[str, str]:
    return _headers("viewer@test.local", "viewer")
