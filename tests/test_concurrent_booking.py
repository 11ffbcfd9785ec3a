"""
Two bookings racing for the same vehicle and dates: exactly one wins.
"""
import asyncio
from datetime import date

from sqlalchemy import func, select

from rental_api.api.v1.orders.schemas import AdminCreateOrderRequest
from rental_api.api.v1.orders.service import OrderService
from rental_api.core.exceptions import ConflictError
from rental_api.models.enums import Role
from rental_api.models.order import Order


async def test_parallel_bookings_for_same_window(session_maker, make_user, make_vehicle):
    owner = await make_user(Role.owner)
    first_renter = await make_user(Role.customer)
    second_renter = await make_user(Role.customer)
    vehicle = await make_vehicle(owner)

    async def book(user_id):
        async with session_maker() as session:
            return await OrderService(session).create_admin_order(
                AdminCreateOrderRequest(
                    user_id=user_id,
                    vehicle_id=vehicle.id,
                    start_date=date(2024, 6, 1),
                    end_date=date(2024, 6, 4),
                )
            )

    results = await asyncio.gather(book(first_renter.id), book(second_renter.id), return_exceptions=True)

    conflicts = [r for r in results if isinstance(r, ConflictError)]
    orders = [r for r in results if isinstance(r, Order)]
    assert len(orders) == 1
    assert len(conflicts) == 1
    assert conflicts[0].message == "Vehicle is not available for the selected dates"

    async with session_maker() as session:
        count = await session.scalar(select(func.count(Order.id)).where(Order.vehicle_id == vehicle.id))
    assert count == 1


async def test_parallel_bookings_for_different_vehicles_both_succeed(session_maker, make_user, make_vehicle):
    owner = await make_user(Role.owner)
    renter = await make_user(Role.customer)
    first = await make_vehicle(owner)
    second = await make_vehicle(owner)

    async def book(vehicle_id):
        async with session_maker() as session:
            return await OrderService(session).create_admin_order(
                AdminCreateOrderRequest(
                    user_id=renter.id,
                    vehicle_id=vehicle_id,
                    start_date=date(2024, 6, 1),
                    end_date=date(2024, 6, 4),
                )
            )

    results = await asyncio.gather(book(first.id), book(second.id), return_exceptions=True)
    assert all(isinstance(r, Order) for r in results)
