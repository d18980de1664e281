"""
Car Store Backend — Order Request/Response Schemas
====================================================

What:  Pydantic models for POST /api/orders and GET /api/orders/revenue.

The car reference travels as "car" on the wire and is stored as car_id.
totalPrice is never accepted from the client; the service derives it from
the car's price at order time.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.common import CamelModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class OrderCreate(CamelModel):
    """Payload for POST /api/orders."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    email: str = Field(max_length=320, pattern=EMAIL_PATTERN)
    car_id: uuid.UUID = Field(alias="car")
    quantity: int = Field(ge=1, strict=True)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class OrderResponse(CamelModel):
    id: uuid.UUID
    email: str
    # Null once the ordered car has been deleted
    car_id: Optional[uuid.UUID] = Field(default=None, alias="car")
    quantity: int
    total_price: float
    created_at: datetime
    updated_at: datetime


class RevenueResponse(CamelModel):
    total_revenue: float = Field(description="Sum of totalPrice across all orders")
