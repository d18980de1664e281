"""
Car Store Backend — Car SQLAlchemy Model
==========================================

What:  ORM model representing the `cars` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by CarService and OrderService.

Table Design:
    - UUID primary key generated in Python (portable across PostgreSQL and SQLite)
    - category: short enum-like string validated at the API boundary
    - quantity / in_stock: decremented and recomputed when orders are placed
    - Indexes on brand and category back the free-text search
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Float, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Car(Base):
    """
    A car model held in inventory.

    Lifecycle:
        1. Created by POST /api/cars
        2. Mutated by PUT /api/cars/{id} and by order placement (stock only)
        3. Removed by DELETE /api/cars/{id}; orders keep a null reference
    """

    __tablename__ = "cars"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    brand: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    # Set explicitly by the services on every write
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    __table_args__ = (
        Index("idx_cars_brand", "brand"),
        Index("idx_cars_category", "category"),
        CheckConstraint("price >= 0", name="ck_cars_price_non_negative"),
        CheckConstraint("quantity >= 0", name="ck_cars_quantity_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<Car(id={self.id}, brand='{self.brand}', model='{self.model}', "
            f"quantity={self.quantity})>"
        )
