from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.v1.orders.schemas import (
    AdminCreateOrderRequest,
    AdminUpdateOrderRequest,
    OrderResponse,
)
from rental_api.api.v1.orders.service import OrderService
from rental_api.core.deps import get_db, get_current_staff_user
from rental_api.core.exceptions import AppException

router = APIRouter(dependencies=[Depends(get_current_staff_user)])


@router.get(
    "/",
    response_model=List[OrderResponse],
    summary="List all orders",
    description="All orders, newest first, with renter and vehicle details. Admin/owner only.",
)
async def list_orders(
    db: AsyncSession = Depends(get_db),
):
    order_service = OrderService(db)
    orders = await order_service.list_orders()
    return [OrderResponse.model_validate(order) for order in orders]


@router.post(
    "/",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an order for a user",
    description=(
        "Books a vehicle for any user. Rental days and total are computed from the vehicle's "
        "daily rate; fails with 409 if the vehicle is already booked for an overlapping period."
    ),
)
async def create_order(
    data: AdminCreateOrderRequest,
    db: AsyncSession = Depends(get_db),
):
    order_service = OrderService(db)
    order = await order_service.create_admin_order(data)
    return OrderResponse.model_validate(order)


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order by ID",
)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
):
    order_service = OrderService(db)
    order = await order_service.get_order(order_id)
    if not order:
        AppException().raise_404("Order not found")
    return OrderResponse.model_validate(order)


@router.put(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Update order",
    description="Replaces the order's booking details. The order itself is ignored when checking for overlaps.",
)
async def update_order(
    order_id: int,
    data: AdminUpdateOrderRequest,
    db: AsyncSession = Depends(get_db),
):
    order_service = OrderService(db)
    order = await order_service.update_order(order_id, data)
    return OrderResponse.model_validate(order)


@router.delete(
    "/{order_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete order",
)
async def delete_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
):
    order_service = OrderService(db)
    await order_service.delete_order(order_id)
    return {"message": "Order deleted successfully"}
