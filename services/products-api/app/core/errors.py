from __future__ import annotations

from typing import Any, Dict, List


class ProductsAPIError(Exception):
    """
    Base class for errors the API turns into a JSON response.

    Subclasses set `http_status` and decide the body shape in `to_response()`.
    """

    http_status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


class InputValidationError(ProductsAPIError):
    """One or more field checks failed; carries every failure in declaration order."""

    http_status = 400

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors

    def to_response(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class ProductNotFoundError(ProductsAPIError):
    http_status = 404

    def __init__(self, product_id: int) -> None:
        super().__init__("Product not founded")
        self.product_id = product_id


class StorageError(ProductsAPIError):
    """
    The database was unreachable or a statement failed.

    The response never includes driver details; `operation` is kept for logs.
    """

    http_status = 500

    def __init__(self, operation: str) -> None:
        super().__init__("Internal server error")
        self.operation = operation
