import os
from typing import Iterator

import pytest

# --- Entorno de tests: debe fijarse ANTES de importar la app (Settings y engine se cachean) ---
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("CORS_ALLOWED_ORIGINS", "http://localhost:5173")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.core.db import Base, get_engine, get_sessionmaker  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Product  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_tables() -> Iterator[None]:
    """Fresh products table for every test (in-memory SQLite, shared via StaticPool)."""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> Iterator[TestClient]:
    # Context manager => runs the lifespan (logging + connect_db)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session() -> Iterator[Session]:
    with get_sessionmaker()() as session:
        yield session


@pytest.fixture
def product() -> Product:
    """An existing, available product (detached, attributes already loaded)."""
    with get_sessionmaker()() as session:
        item = Product(name="Monitor Curvo de 49 Pulgadas", price=300, availability=True)
        session.add(item)
        session.commit()
        session.refresh(item)
    return item


# =========================
# Live HTTP tests (opcional)
# =========================
@pytest.fixture(scope="session")
def base_url() -> str:
    """
    Base URL of a running products-api container.
    Live tests only run with RUN_HTTP_TESTS=1.
    """
    if os.getenv("RUN_HTTP_TESTS", "0").strip() != "1":
        pytest.skip("live HTTP tests disabled (set RUN_HTTP_TESTS=1)")
    return os.getenv("PRODUCTS_BASE_URL", "http://localhost:4000").strip().rstrip("/")
