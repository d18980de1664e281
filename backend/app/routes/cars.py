"""
Car Store Backend — Car Route Handlers
========================================

What:  CRUD endpoints under /api/cars.
How:   Each handler validates the body (write paths), delegates to
       CarService, and wraps the result in the success envelope.
       Failures propagate as app exceptions; the handlers registered in
       app.main render them:

       POST   /api/cars            200 | 400 | 500
       GET    /api/cars            200 | 404 (no results) | 500
       GET    /api/cars/{carId}    200 | 404 | 500
       PUT    /api/cars/{carId}    200 | 400 | 404 | 500
       DELETE /api/cars/{carId}    200 | 404 (malformed id) | 500

The body is taken as raw JSON so that schema failures come back as the
400 envelope from app.validation rather than FastAPI's default 422.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import NotFoundError
from app.schemas.car import CarResponse
from app.schemas.common import ApiResponse, ErrorResponse
from app.services.car_service import car_service
from app.validation import validate_car, validate_car_update

router = APIRouter(prefix="/api/cars", tags=["Cars"])


@router.post(
    "",
    response_model=ApiResponse[CarResponse],
    responses={
        400: {"description": "Validation failed", "model": ErrorResponse},
        500: {"description": "Car could not be created", "model": ErrorResponse},
    },
    summary="Create a car",
)
async def create_car(
    payload: Any = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[CarResponse]:
    data = validate_car(payload)
    car = await car_service.create_car(db, data)
    return ApiResponse[CarResponse](message="Car created successfully", data=car)


@router.get(
    "",
    response_model=ApiResponse[List[CarResponse]],
    responses={
        404: {"description": "No car matched", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List cars, optionally filtered by a search term",
)
async def list_cars(
    search_term: Optional[str] = Query(
        default=None,
        alias="searchTerm",
        description="Case-insensitive match against brand, model or category",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[CarResponse]]:
    """List every matching car. An empty result is a 404, not an empty list."""
    cars = await car_service.list_cars(db, search_term=search_term)
    if not cars:
        raise NotFoundError(resource="car", message="No cars found.")
    return ApiResponse[List[CarResponse]](message="Cars retrieved successfully", data=cars)


@router.get(
    "/{car_id}",
    response_model=ApiResponse[CarResponse],
    responses={
        404: {"description": "Car not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single car by ID",
)
async def get_car(
    car_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[CarResponse]:
    # car_id stays a plain string: a malformed id is a 404, not a 422
    car = await car_service.get_car(db, car_id)
    return ApiResponse[CarResponse](message="Car retrieved successfully", data=car)


@router.put(
    "/{car_id}",
    response_model=ApiResponse[CarResponse],
    responses={
        400: {"description": "Empty payload, missing price/quantity, or invalid field", "model": ErrorResponse},
        404: {"description": "Car not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a car",
    description="Partial update. price and quantity must always be included.",
)
async def update_car(
    car_id: str,
    payload: Any = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[CarResponse]:
    changes = validate_car_update(payload)
    car = await car_service.update_car(db, car_id, changes)
    return ApiResponse[CarResponse](message="Car updated successfully", data=car)


@router.delete(
    "/{car_id}",
    response_model=ApiResponse[Dict[str, Any]],
    responses={
        404: {"description": "Malformed car ID", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a car",
)
async def delete_car(
    car_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[Dict[str, Any]]:
    await car_service.delete_car(db, car_id)
    return ApiResponse[Dict[str, Any]](message="Car deleted successfully", data={})
