"""
Car Store Backend — Order Route Handlers
==========================================

What:  POST /api/orders (place an order) and GET /api/orders/revenue.
How:   Same shape as the car handlers: validate, delegate, wrap.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.order import OrderResponse, RevenueResponse
from app.services.order_service import order_service
from app.validation import validate_order

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post(
    "",
    response_model=ApiResponse[OrderResponse],
    responses={
        400: {"description": "Validation failed or insufficient stock", "model": ErrorResponse},
        404: {"description": "Car not found", "model": ErrorResponse},
        500: {"description": "Order could not be created", "model": ErrorResponse},
    },
    summary="Place an order for a car",
    description=(
        "Decrements the car's stock by the ordered quantity. totalPrice is "
        "computed from the car's current price."
    ),
)
async def create_order(
    payload: Any = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[OrderResponse]:
    data = validate_order(payload)
    order = await order_service.create_order(db, data)
    return ApiResponse[OrderResponse](message="Order created successfully", data=order)


@router.get(
    "/revenue",
    response_model=ApiResponse[RevenueResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Total revenue across all orders",
)
async def get_revenue(
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[RevenueResponse]:
    revenue = await order_service.total_revenue(db)
    return ApiResponse[RevenueResponse](message="Revenue calculated successfully", data=revenue)
