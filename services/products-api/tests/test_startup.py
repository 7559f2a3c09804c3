import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from app.core import db as db_module
from app.core.config import get_settings
from app.main import app


@pytest.fixture
def unreachable_database(monkeypatch, tmp_path):
    # SQLite can't open a file inside a directory that doesn't exist
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'products.db'}")
    monkeypatch.setattr(db_module, "get_engine", lambda: engine)
    return engine


def test_connect_db_creates_tables_and_reports_success(caplog):
    caplog.set_level(logging.INFO, logger="app.core.db")

    assert db_module.connect_db() is True
    assert "Successful connection" in caplog.text


def test_connect_db_handles_connection_error(unreachable_database, caplog):
    caplog.set_level(logging.ERROR, logger="app.core.db")

    assert db_module.connect_db() is False
    assert "There was an error connecting to the database..." in caplog.text


def test_startup_aborts_when_database_is_required(unreachable_database, monkeypatch):
    monkeypatch.setattr(get_settings(), "db_required_on_startup", True)

    with pytest.raises(RuntimeError, match="Database unavailable"):
        with TestClient(app):
            pass


def test_startup_continues_degraded_when_database_is_optional(unreachable_database, monkeypatch):
    monkeypatch.setattr(get_settings(), "db_required_on_startup", False)
    monkeypatch.setattr("app.main.database_is_up", lambda: False)

    with TestClient(app) as c:
        assert app.state.db_ready is False
        r = c.get("/health")

    assert r.status_code == 200
    assert r.json()["database"] == "down"
