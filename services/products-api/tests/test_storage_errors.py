"""
Storage failures must come back as a generic 500 and never take the app down.

The persistence handle is swapped through app.dependency_overrides[get_db].
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.core.deps import get_db
from app.main import app


class BrokenSession:
    """Session stand-in whose every statement fails like a dropped connection."""

    def __init__(self) -> None:
        self.rolled_back = 0

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionError("server closed the connection"))

    execute = get = add = commit = refresh = delete = _fail

    def rollback(self) -> None:
        self.rolled_back += 1

    def close(self) -> None:
        pass


@pytest.fixture
def broken_session(client: TestClient) -> BrokenSession:
    session = BrokenSession()

    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    return session


@pytest.mark.parametrize(
    "method, path, payload",
    [
        ("GET", "/api/products", None),
        ("GET", "/api/products/1", None),
        ("POST", "/api/products", {"name": "Mouse", "price": 50}),
        ("PUT", "/api/products/1", {"name": "Mouse", "price": 50, "availability": True}),
        ("PATCH", "/api/products/1", None),
        ("DELETE", "/api/products/1", None),
    ],
)
def test_storage_failure_returns_generic_500(client: TestClient, broken_session, method, path, payload):
    r = client.request(method, path, json=payload)

    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
    assert broken_session.rolled_back == 1


def test_validation_still_wins_over_storage_failure(client: TestClient, broken_session):
    r = client.post("/api/products", json={})

    assert r.status_code == 400
    assert broken_session.rolled_back == 0


def test_app_keeps_serving_after_storage_failure(client: TestClient, broken_session):
    assert client.get("/api/products").status_code == 500

    app.dependency_overrides.clear()
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json() == {"data": []}


def test_unexpected_errors_are_hidden_behind_a_500(client: TestClient, monkeypatch, caplog):
    def explode(db):
        raise ZeroDivisionError("boom")

    monkeypatch.setattr("app.api.routes.list_products", explode)

    with caplog.at_level("ERROR", logger="app.access"):
        r = client.get("/api/products", headers={"X-Request-Id": "req-500"})

    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
    assert r.headers["X-Request-Id"] == "req-500"
    assert "boom" not in r.text
    assert any(rec.exc_info and "Unhandled exception on GET /api/products" in rec.getMessage() for rec in caplog.records)
