from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.v1.orders.schemas import CreateOrderRequest, OrderResponse, QuoteRequest, QuoteResponse
from rental_api.api.v1.orders.service import OrderService
from rental_api.core.deps import get_db, get_current_user
from rental_api.models.user import User

router = APIRouter()


@router.post(
    "/quote",
    response_model=QuoteResponse,
    status_code=status.HTTP_200_OK,
    summary="Quote a rental",
    description="Price a rental and report whether the vehicle is free for the period, without booking it.",
)
async def quote_rental(
    data: QuoteRequest,
    db: AsyncSession = Depends(get_db),
):
    order_service = OrderService(db)
    return await order_service.quote(data)


@router.post(
    "/",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a vehicle",
    description=(
        "Create an order for the logged-in user. A deposit equal to the total marks the order PAID, "
        "otherwise it awaits review. Fails with 409 if the vehicle is already booked for an overlapping period."
    ),
)
async def create_order(
    data: CreateOrderRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order_service = OrderService(db)
    order = await order_service.create_renter_order(current_user, data)
    return OrderResponse.model_validate(order)
