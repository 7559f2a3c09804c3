from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    """Request body for POST /api/products (documentation only; input goes through app.validation)."""

    name: str = Field(min_length=1, max_length=255, examples=["Blue Headphones"])
    price: float = Field(gt=0, examples=[399])


class ProductUpdate(ProductCreate):
    availability: bool = Field(examples=[True])


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="The Product ID", examples=[1])
    name: str = Field(description="The Product name", examples=["Blue headphones"])
    price: float = Field(description="The Product price", examples=[300])
    availability: bool = Field(description="The Product availability", examples=[True])


# --- Envelopes: {data}, {errors}, {error} ---
class ProductEnvelope(BaseModel):
    data: ProductRead


class ProductListEnvelope(BaseModel):
    data: List[ProductRead]


class MessageEnvelope(BaseModel):
    data: str = Field(examples=["Product deleted"])


class FieldError(BaseModel):
    field: str
    location: str
    message: str
    value: Optional[Any] = None


class ValidationErrorResponse(BaseModel):
    errors: List[FieldError]


class ErrorResponse(BaseModel):
    error: str = Field(examples=["Product not founded"])
