"""
Car Store Backend — Order Service (Data Access)
=================================================

What:  Order placement and revenue reporting.
Who:   Called by the /api/orders route handlers.

Order placement (one transaction, committed by get_db_session):
    1. UPDATE cars
          SET quantity = quantity - :n, in_stock = (quantity - :n) > 0
        WHERE id = :car AND quantity >= :n
    RETURNING price
    2. No row returned → the car is absent (404) or has too little stock (400)
    3. INSERT the order with total_price = price * n

    Step 1 is a single conditional statement, so two concurrent orders for
    the last unit cannot both succeed: the store serializes the row update
    and the loser's WHERE clause no longer matches.
"""

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, InsufficientStockError, NotFoundError
from app.models.car import Car, utc_now
from app.models.order import Order
from app.schemas.order import OrderCreate, OrderResponse, RevenueResponse

logger = logging.getLogger(__name__)


class OrderService:

    async def create_order(self, db: AsyncSession, data: OrderCreate) -> OrderResponse:
        """
        Place an order and decrement the car's stock.

        Raises:
            NotFoundError: the car does not exist (→ 404)
            InsufficientStockError: quantity exceeds available stock (→ 400)
            DatabaseError: a store operation failed (→ 500)
        """
        car_id = str(data.car_id)
        now = utc_now()
        try:
            result = await db.execute(
                update(Car)
                .where(Car.id == data.car_id, Car.quantity >= data.quantity)
                .values(
                    quantity=Car.quantity - data.quantity,
                    in_stock=(Car.quantity - data.quantity) > 0,
                    updated_at=now,
                )
                .returning(Car.price)
                .execution_options(synchronize_session=False)
            )
            price = result.scalar_one_or_none()

            if price is None:
                exists = await db.execute(select(Car.id).where(Car.id == data.car_id))
                if exists.scalar_one_or_none() is None:
                    raise NotFoundError(resource="car", resource_id=car_id)
                raise InsufficientStockError(car_id=car_id, requested=data.quantity)

            order = Order(
                id=uuid.uuid4(),
                email=data.email,
                car_id=data.car_id,
                quantity=data.quantity,
                total_price=price * data.quantity,
                created_at=now,
                updated_at=now,
            )
            db.add(order)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating order for car %s: %s", car_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Order could not be created!",
                context={"car_id": car_id},
            ) from e

        logger.info(
            "Order %s placed: car=%s quantity=%d total=%.2f",
            order.id, car_id, order.quantity, order.total_price,
        )
        return OrderResponse.model_validate(order)

    async def total_revenue(self, db: AsyncSession) -> RevenueResponse:
        """Sum of total_price over all orders; 0 when there are none."""
        try:
            result = await db.execute(
                select(func.coalesce(func.sum(Order.total_price), 0))
            )
            total = result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("Database error calculating revenue: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Revenue could not be calculated",
                context={"error_type": type(e).__name__},
            ) from e

        return RevenueResponse(total_revenue=float(total))


order_service = OrderService()
