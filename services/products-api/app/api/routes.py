from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.repositories import (
    create_product,
    delete_product,
    get_product,
    list_products,
    toggle_availability,
    update_product,
)
from app.schemas import (
    ErrorResponse,
    MessageEnvelope,
    ProductCreate,
    ProductEnvelope,
    ProductListEnvelope,
    ProductRead,
    ProductUpdate,
    ValidationErrorResponse,
)
from app.validation import (
    BODY,
    PARAMS,
    Check,
    ValidatedInput,
    greater_than,
    is_boolean,
    is_int,
    is_numeric,
    is_text,
    max_length,
    not_empty,
    to_bool,
    to_int,
    to_price,
    validate,
)

router = APIRouter(prefix="/api/products", tags=["Products"])

# -------------------------
# Validation rules (orden = orden de los errores reportados)
# -------------------------
NAME_MAX_LENGTH = 255  # products.name is String(255)

PRODUCT_FIELD_CHECKS = (
    Check("name", BODY, not_empty, "The name can't be empty"),
    Check("name", BODY, is_text, "The name must be a string"),
    Check("name", BODY, max_length(NAME_MAX_LENGTH), f"The name can't be longer than {NAME_MAX_LENGTH} characters"),
    Check("price", BODY, is_numeric, "Number not valid"),
    Check("price", BODY, not_empty, "The price can't be empty"),
    Check("price", BODY, greater_than(0), "The price must be greater than 0"),
)

GET_ID_CHECK = Check("id", PARAMS, is_int, "ID invalid")
ID_CHECK = Check("id", PARAMS, is_int, "Invalid ID")
AVAILABILITY_CHECK = Check("availability", BODY, is_boolean, "Value for availability not valid")

_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse, "description": "Bad Request"}}
_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Product not found"}}


def _json_body(model) -> dict:
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


def _envelope(product) -> ProductEnvelope:
    return ProductEnvelope(data=ProductRead.model_validate(product))


@router.get("", response_model=ProductListEnvelope, summary="Get a list of products")
def http_list_products(db: Session = Depends(get_db)):
    """Return every product."""
    products = list_products(db)
    return ProductListEnvelope(data=[ProductRead.model_validate(p) for p in products])


@router.get(
    "/{id}",
    response_model=ProductEnvelope,
    summary="Get a product by ID",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def http_get_product(
    id: str = Path(description="The ID of the product (integer)", examples=["1"]),
    _: ValidatedInput = Depends(validate(GET_ID_CHECK)),
    db: Session = Depends(get_db),
):
    """Return a product based on its unique ID."""
    return _envelope(get_product(db, to_int(id)))


@router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    responses=_BAD_REQUEST,
    openapi_extra=_json_body(ProductCreate),
)
def http_create_product(
    payload: ValidatedInput = Depends(validate(*PRODUCT_FIELD_CHECKS)),
    db: Session = Depends(get_db),
):
    """Create a product; availability starts as true."""
    product = create_product(
        db,
        name=str(payload.body["name"]).strip(),
        price=to_price(payload.body["price"]),
    )
    return _envelope(product)


@router.put(
    "/{id}",
    response_model=ProductEnvelope,
    summary="Update a product with user input",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
    openapi_extra=_json_body(ProductUpdate),
)
def http_update_product(
    id: str = Path(description="The ID of the product (integer)", examples=["1"]),
    payload: ValidatedInput = Depends(validate(ID_CHECK, *PRODUCT_FIELD_CHECKS, AVAILABILITY_CHECK)),
    db: Session = Depends(get_db),
):
    """Replace name, price and availability. Validation runs before the existence check."""
    product = update_product(
        db,
        to_int(id),
        name=str(payload.body["name"]).strip(),
        price=to_price(payload.body["price"]),
        availability=to_bool(payload.body["availability"]),
    )
    return _envelope(product)


@router.patch(
    "/{id}",
    response_model=ProductEnvelope,
    summary="Update Product availability",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def http_toggle_availability(
    id: str = Path(description="The ID of the product (integer)", examples=["1"]),
    _: ValidatedInput = Depends(validate(ID_CHECK)),
    db: Session = Depends(get_db),
):
    """Flip availability to its negation. No body."""
    return _envelope(toggle_availability(db, to_int(id)))


@router.delete(
    "/{id}",
    response_model=MessageEnvelope,
    summary="Delete a product",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def http_delete_product(
    id: str = Path(description="The ID of the product (integer)", examples=["1"]),
    _: ValidatedInput = Depends(validate(ID_CHECK)),
    db: Session = Depends(get_db),
):
    delete_product(db, to_int(id))
    return MessageEnvelope(data="Product deleted")
