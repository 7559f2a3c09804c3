from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ProductNotFoundError, StorageError
from app.core.logging import get_logger
from app.models import Product

logger = get_logger(__name__)

# Signed 64-bit: widest INTEGER any supported backend stores.
_MIN_ID, _MAX_ID = -(2**63), 2**63 - 1


@contextmanager
def _storage_guard(db: Session, operation: str) -> Iterator[None]:
    """Rollback and re-raise any SQLAlchemy failure as StorageError."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Storage failure during %s", operation)
        raise StorageError(operation) from e


def list_products(db: Session) -> list[Product]:
    with _storage_guard(db, "list_products"):
        return list(db.execute(select(Product).order_by(Product.id)).scalars().all())


def get_product(db: Session, product_id: int) -> Product:
    product = None
    if _MIN_ID <= product_id <= _MAX_ID:
        with _storage_guard(db, "get_product"):
            product = db.get(Product, product_id)
    if product is None:
        logger.warning("Product id=%s not found", product_id)
        raise ProductNotFoundError(product_id)
    return product


def create_product(db: Session, *, name: str, price: float) -> Product:
    product = Product(name=name, price=price, availability=True)
    with _storage_guard(db, "create_product"):
        db.add(product)
        db.commit()
        db.refresh(product)
    logger.info("Product id=%s created", product.id)
    return product


def update_product(db: Session, product_id: int, *, name: str, price: float, availability: bool) -> Product:
    product = get_product(db, product_id)
    with _storage_guard(db, "update_product"):
        product.name = name
        product.price = price
        product.availability = availability
        db.commit()
        db.refresh(product)
    logger.info("Product id=%s updated", product.id)
    return product


def toggle_availability(db: Session, product_id: int) -> Product:
    product = get_product(db, product_id)
    with _storage_guard(db, "toggle_availability"):
        product.availability = not product.availability
        db.commit()
        db.refresh(product)
    logger.info("Product id=%s availability set to %s", product.id, product.availability)
    return product


def delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)
    with _storage_guard(db, "delete_product"):
        db.delete(product)
        db.commit()
    logger.info("Product id=%s deleted", product_id)
