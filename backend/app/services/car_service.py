"""
Car Store Backend — Car Service (Data Access)
===============================================

What:  CRUD and search operations on the `cars` table.
Why:   Keeps SQLAlchemy out of the route handlers.
How:   Each method receives the request's AsyncSession, runs one logical
       store operation, and returns response schemas.
Who:   Called by the /api/cars route handlers.

Error Handling Strategy:
    - Unknown or unparseable identifiers raise NotFoundError. A malformed
      id can never match a row, so it is reported the same way as an
      absent one instead of surfacing a driver error.
    - SQLAlchemy failures are wrapped in DatabaseError with an
      operation-specific message (→ 500).
    - Transactions are committed by get_db_session; methods only flush.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.models.car import Car, utc_now
from app.models.order import Order
from app.schemas.car import CarCreate, CarResponse, CarUpdate

logger = logging.getLogger(__name__)


def parse_id(value: str) -> Optional[uuid.UUID]:
    """Parse a path identifier; None when it is not a UUID."""
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so a search term only matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CarService:
    """
    Data access for cars.

    Responsibilities:
        - create_car(): insert a validated car
        - list_cars(): full listing or case-insensitive search
        - get_car(): single car by id
        - update_car(): partial update of a car
        - delete_car(): idempotent delete
    """

    async def _load(self, db: AsyncSession, car_id: str) -> Car:
        car_uuid = parse_id(car_id)
        if car_uuid is None:
            raise NotFoundError(resource="car", resource_id=car_id)

        result = await db.execute(select(Car).where(Car.id == car_uuid))
        car = result.scalar_one_or_none()
        if car is None:
            raise NotFoundError(resource="car", resource_id=car_id)
        return car

    async def create_car(self, db: AsyncSession, data: CarCreate) -> CarResponse:
        """
        Insert a new car.

        Raises:
            DatabaseError: the insert failed (→ 500)
        """
        try:
            car = Car(**data.to_record())
            db.add(car)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating car: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Car could not be created!",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Car created: %s (%s %s)", car.id, car.brand, car.model)
        return CarResponse.model_validate(car)

    async def list_cars(
        self,
        db: AsyncSession,
        search_term: Optional[str] = None,
    ) -> List[CarResponse]:
        """
        Return every car, or those whose brand, model or category contains
        `search_term` (case-insensitive). Results are not paginated.

        An empty list is a valid result here; the route decides what an
        empty result means for the client.
        """
        query = select(Car)
        term = (search_term or "").strip()
        if term:
            pattern = f"%{escape_like(term)}%"
            query = query.where(
                or_(
                    Car.brand.ilike(pattern, escape="\\"),
                    Car.model.ilike(pattern, escape="\\"),
                    Car.category.ilike(pattern, escape="\\"),
                )
            )
        query = query.order_by(Car.created_at.desc())

        try:
            result = await db.execute(query)
            cars = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing cars: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while fetching cars",
                context={"error_type": type(e).__name__, "search_term": term},
            ) from e

        return [CarResponse.model_validate(car) for car in cars]

    async def get_car(self, db: AsyncSession, car_id: str) -> CarResponse:
        """
        Raises:
            NotFoundError: no car with this id, or the id is malformed (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        try:
            car = await self._load(db, car_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching car %s: %s", car_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the car. Please try again.",
                context={"car_id": car_id},
            ) from e
        return CarResponse.model_validate(car)

    async def update_car(
        self,
        db: AsyncSession,
        car_id: str,
        changes: CarUpdate,
    ) -> CarResponse:
        """
        Apply the fields the client sent to an existing car.

        Raises:
            NotFoundError: no car with this id, or the id is malformed (→ 404)
            DatabaseError: the update failed (→ 500)
        """
        try:
            car = await self._load(db, car_id)
            for field, value in changes.to_changes().items():
                setattr(car, field, value)
            car.updated_at = utc_now()
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating car %s: %s", car_id, str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while updating the car",
                context={"car_id": car_id},
            ) from e

        logger.info("Car updated: %s", car.id)
        return CarResponse.model_validate(car)

    async def delete_car(self, db: AsyncSession, car_id: str) -> None:
        """
        Delete a car. Deleting an id that no longer exists succeeds.

        Orders that referenced the car keep their totals; their car
        reference is cleared first so SQLite (no enforced foreign keys)
        and PostgreSQL end in the same state.

        Raises:
            NotFoundError: the id is malformed (→ 404)
            DatabaseError: the delete failed (→ 500)
        """
        car_uuid = parse_id(car_id)
        if car_uuid is None:
            raise NotFoundError(resource="car", resource_id=car_id)

        try:
            await db.execute(
                update(Order)
                .where(Order.car_id == car_uuid)
                .values(car_id=None, updated_at=utc_now())
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(
                delete(Car)
                .where(Car.id == car_uuid)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting car %s: %s", car_id, str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while deleting the car",
                context={"car_id": car_id},
            ) from e

        if result.rowcount:
            logger.info("Car deleted: %s", car_uuid)
        else:
            logger.info("Delete requested for absent car: %s", car_uuid)


car_service = CarService()
