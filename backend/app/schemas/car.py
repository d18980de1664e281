"""
Car Store Backend — Car Request/Response Schemas
==================================================

What:  Pydantic models defining the Car API contract.
How:   CarCreate and CarUpdate carry the declarative validation rules;
       app.validation turns their failures into per-field error maps.
       CarResponse is built from the ORM model (from_attributes).

Rules:
    brand, model  non-empty strings (surrounding whitespace stripped)
    year          EARLIEST_MODEL_YEAR .. next calendar year
    price         finite number >= 0
    quantity      integer >= 0
    category      one of CarCategory
    inStock       optional; defaults to quantity > 0

Numbers and booleans are matched strictly: "20000" is not a price and
true is not a quantity.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.common import CamelModel

# Year of the first production automobile
EARLIEST_MODEL_YEAR = 1886


class CarCategory(str, Enum):
    SEDAN = "Sedan"
    SUV = "SUV"
    TRUCK = "Truck"
    COUPE = "Coupe"
    CONVERTIBLE = "Convertible"


def _check_year(value: int) -> int:
    latest = datetime.now(timezone.utc).year + 1
    if not EARLIEST_MODEL_YEAR <= value <= latest:
        raise ValueError(f"Year must be between {EARLIEST_MODEL_YEAR} and {latest}")
    return value


_WRITE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
    extra="ignore",
)


class CarCreate(CamelModel):
    """Payload for POST /api/cars."""

    model_config = _WRITE_CONFIG

    brand: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int = Field(strict=True)
    price: float = Field(ge=0, strict=True, allow_inf_nan=False)
    category: CarCategory
    description: Optional[str] = Field(default=None, max_length=2000)
    quantity: int = Field(ge=0, strict=True)
    in_stock: Optional[bool] = Field(default=None, strict=True)

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: int) -> int:
        return _check_year(v)

    def to_record(self) -> dict:
        """Column values for a new Car row, with inStock derived if omitted."""
        record = self.model_dump()
        record["category"] = self.category.value
        if record["in_stock"] is None:
            record["in_stock"] = self.quantity > 0
        return record


class CarUpdate(CamelModel):
    """
    Payload for PUT /api/cars/{carId}.

    Every field is optional here; app.validation.validate_car_update
    additionally requires price and quantity. A field that is sent must not
    be null.
    """

    model_config = _WRITE_CONFIG

    brand: Optional[str] = Field(default=None, min_length=1, max_length=100)
    model: Optional[str] = Field(default=None, min_length=1, max_length=100)
    year: Optional[int] = Field(default=None, strict=True)
    price: Optional[float] = Field(default=None, ge=0, strict=True, allow_inf_nan=False)
    category: Optional[CarCategory] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    quantity: Optional[int] = Field(default=None, ge=0, strict=True)
    in_stock: Optional[bool] = Field(default=None, strict=True)

    @field_validator("brand", "model", "year", "price", "category", "quantity", "in_stock", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field may not be null")
        return v

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: int) -> int:
        return _check_year(v)

    def to_changes(self) -> dict:
        """Column values to apply, limited to the fields the client sent."""
        changes = self.model_dump(exclude_unset=True)
        if "category" in changes:
            changes["category"] = self.category.value
        if "in_stock" not in changes and "quantity" in changes:
            changes["in_stock"] = changes["quantity"] > 0
        return changes


class CarResponse(CamelModel):
    """Full representation of a car, as returned by every Car endpoint."""

    id: uuid.UUID
    brand: str
    model: str
    year: int
    price: float
    category: str
    description: Optional[str] = None
    quantity: int
    in_stock: bool
    created_at: datetime
    updated_at: datetime
