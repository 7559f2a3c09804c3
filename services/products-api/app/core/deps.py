from typing import Generator

from sqlalchemy.orm import Session

from app.core.db import get_sessionmaker


def get_db() -> Generator[Session, None, None]:
    """
    Request-scoped persistence handle.

    Routes receive it through Depends(get_db); tests swap it with
    app.dependency_overrides[get_db].
    """
    SessionLocal = get_sessionmaker()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
