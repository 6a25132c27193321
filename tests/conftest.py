"""Pytest fixtures: repo root on sys.path, a throwaway SQLite store and an API client."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import store  # noqa: E402


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setattr(store, "DB_PATH", str(tmp_path / "landscape-test.db"))
    store.init_db()
    return store.DB_PATH


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    import server

    with TestClient(server.app) as c:
        yield c
