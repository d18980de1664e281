"""
Car Store Backend — Order SQLAlchemy Model
============================================

What:  ORM model representing the append-only `orders` table.
Who:   Written by OrderService.create_order(); summed by OrderService.total_revenue().

Referential integrity:
    car_id references cars.id with ON DELETE SET NULL. Deleting a car keeps
    its orders (and their total_price) for revenue reporting.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.car import utc_now


class Order(Base):
    """A purchase of `quantity` units of one car by `email`."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    car_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("cars.id", ondelete="SET NULL"),
        nullable=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    # Price of the car at order time multiplied by quantity
    total_price: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    __table_args__ = (
        Index("idx_orders_car_id", "car_id"),
        CheckConstraint("quantity >= 1", name="ck_orders_quantity_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, car_id={self.car_id}, quantity={self.quantity}, "
            f"total_price={self.total_price})>"
        )
