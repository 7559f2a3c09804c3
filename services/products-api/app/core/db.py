# app/core/db.py
from __future__ import annotations

import os
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base declarativa para modelos SQLAlchemy."""


def _database_url() -> str:
    # 1) Entorno (tests, CI, docker)
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url

    # 2) Settings (local / .env)
    return get_settings().database_url_resolved


def _engine_kwargs(url: str) -> dict:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        # pool_pre_ping evita conexiones rotas tras reinicios de Postgres
        return {"pool_pre_ping": True}

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        # Una sola conexión compartida: si no, cada hilo vería su propia DB en memoria.
        kwargs["poolclass"] = StaticPool
    return kwargs


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    url = _database_url()
    return create_engine(url, **_engine_kwargs(url))


@lru_cache(maxsize=1)
def get_sessionmaker() -> sessionmaker:
    return sessionmaker(
        bind=get_engine(),
        autocommit=False,
        autoflush=False,
        class_=Session,
    )


def connect_db() -> bool:
    """
    Check the connection and create missing tables.

    Returns False (after logging) instead of raising; the caller decides whether
    the service can start without a database.
    """
    engine = get_engine()
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error("There was an error connecting to the database... (%s)", e.__class__.__name__)
        logger.debug("Database connection failure details", exc_info=True)
        return False

    logger.info("Successful connection to %s", engine.url.render_as_string(hide_password=True))
    return True


def database_is_up() -> bool:
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e.__class__.__name__)
        return False
