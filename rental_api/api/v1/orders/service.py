import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rental_api.api.v1.orders.schemas import (
    AdminCreateOrderRequest,
    AdminUpdateOrderRequest,
    CreateOrderRequest,
    QuoteRequest,
    QuoteResponse,
)
from rental_api.core.availability import compute_rental, is_blocking, validate_rental_period
from rental_api.core.availability_service import AvailabilityService, vehicle_locks
from rental_api.core.exceptions import ConflictError, NotFoundError
from rental_api.models.enums import OrderStatus, PaymentMethod
from rental_api.models.order import Order
from rental_api.models.user import User
from rental_api.models.vehicle import Vehicle

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.availability = AvailabilityService(db)

    async def get_order(self, order_id: int) -> Optional[Order]:
        result = await self.db.execute(
            select(Order)
            .options(selectinload(Order.user), selectinload(Order.vehicle))
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_orders(self, user_id: Optional[int] = None) -> List[Order]:
        """All orders newest first, or only those placed by `user_id`."""
        query = select(Order).options(selectinload(Order.user), selectinload(Order.vehicle))
        if user_id is not None:
            query = query.where(Order.user_id == user_id)
        result = await self.db.execute(query.order_by(Order.created_at.desc(), Order.id.desc()))
        return list(result.scalars().all())

    async def quote(self, data: QuoteRequest) -> QuoteResponse:
        vehicle = await self.db.get(Vehicle, data.vehicle_id)
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        quote = compute_rental(vehicle.daily_rate, data.start_date, data.end_date, data.deposit_amount)
        available = bool(vehicle.is_available) and await self.availability.is_vehicle_free(
            vehicle.id, data.start_date, data.end_date
        )
        return QuoteResponse(
            vehicle_id=vehicle.id,
            start_date=data.start_date,
            end_date=data.end_date,
            rental_days=quote.days,
            daily_rate=quote.daily_rate,
            total_price=quote.total,
            deposit_amount=quote.deposit,
            remaining_amount=quote.remaining,
            order_status=quote.status,
            available=available,
        )

    async def _ensure_user(self, user_id: int) -> None:
        if await self.db.get(User, user_id) is None:
            raise NotFoundError("User not found")

    async def _ensure_no_conflicts(
        self,
        vehicle_id: int,
        start: date,
        end: date,
        status: OrderStatus,
        exclude_order_id: Optional[int] = None,
    ) -> None:
        # An order that does not block cannot double-book anything
        if not is_blocking(status):
            return
        conflicts = await self.availability.find_conflicts(vehicle_id, start, end, exclude_order_id)
        if conflicts:
            logger.warning(
                "Rejected booking of vehicle %s for %s..%s: overlaps orders %s",
                vehicle_id, start, end, conflicts,
            )
            if exclude_order_id is not None:
                raise ConflictError("Vehicle is already booked for the selected dates by another order")
            raise ConflictError("Vehicle is not available for the selected dates")

    async def _create(
        self,
        *,
        user_id: int,
        vehicle_id: int,
        start_date: date,
        end_date: date,
        deposit_amount: Optional[float] = None,
        order_status: Optional[OrderStatus] = None,
        payment_method: Optional[PaymentMethod] = None,
        admin_notes: Optional[str] = None,
        pickup_location: Optional[str] = None,
        return_location: Optional[str] = None,
        require_listed_vehicle: bool = False,
    ) -> Order:
        validate_rental_period(start_date, end_date)

        async with vehicle_locks.lock(vehicle_id):
            try:
                vehicle = await self.availability.lock_vehicle(vehicle_id)
                if vehicle is None:
                    raise NotFoundError("Vehicle not found")
                if require_listed_vehicle and not vehicle.is_available:
                    raise ConflictError("Vehicle is not available for rent")

                quote = compute_rental(vehicle.daily_rate, start_date, end_date, deposit_amount, order_status)
                await self._ensure_no_conflicts(vehicle_id, start_date, end_date, quote.status)

                order = Order(
                    user_id=user_id,
                    vehicle_id=vehicle_id,
                    start_date=start_date,
                    end_date=end_date,
                    rental_days=quote.days,
                    total_price=quote.total,
                    deposit_amount=quote.deposit,
                    remaining_amount=quote.remaining,
                    payment_method=payment_method.value if payment_method else None,
                    order_status=quote.status.value,
                    admin_notes=admin_notes,
                    pickup_location=pickup_location,
                    return_location=return_location,
                )
                self.db.add(order)
                await self.db.commit()
            except Exception:
                await self.db.rollback()
                raise

        logger.info(
            "Order %s created: vehicle %s for %s..%s, status %s",
            order.id, vehicle_id, start_date, end_date, order.order_status,
        )
        return await self.get_order(order.id)

    async def create_renter_order(self, user: User, data: CreateOrderRequest) -> Order:
        return await self._create(
            user_id=user.id,
            vehicle_id=data.vehicle_id,
            start_date=data.start_date,
            end_date=data.end_date,
            deposit_amount=data.deposit_amount,
            payment_method=data.payment_method,
            pickup_location=data.pickup_location,
            return_location=data.return_location,
            require_listed_vehicle=True,
        )

    async def create_admin_order(self, data: AdminCreateOrderRequest) -> Order:
        validate_rental_period(data.start_date, data.end_date)
        await self._ensure_user(data.user_id)
        return await self._create(
            user_id=data.user_id,
            vehicle_id=data.vehicle_id,
            start_date=data.start_date,
            end_date=data.end_date,
            deposit_amount=data.deposit_amount,
            order_status=data.order_status,
            payment_method=data.payment_method,
            admin_notes=data.admin_notes,
            pickup_location=data.pickup_location,
            return_location=data.return_location,
        )

    async def update_order(self, order_id: int, data: AdminUpdateOrderRequest) -> Order:
        validate_rental_period(data.start_date, data.end_date)
        order = await self.db.get(Order, order_id)
        if not order:
            raise NotFoundError("Order not found")
        await self._ensure_user(data.user_id)

        async with vehicle_locks.lock(data.vehicle_id):
            try:
                vehicle = await self.availability.lock_vehicle(data.vehicle_id)
                if vehicle is None:
                    raise NotFoundError("Vehicle not found")

                deposit = data.deposit_amount if data.deposit_amount is not None else order.deposit_amount
                quote = compute_rental(vehicle.daily_rate, data.start_date, data.end_date, deposit, data.order_status)
                await self._ensure_no_conflicts(
                    vehicle.id, data.start_date, data.end_date, quote.status, exclude_order_id=order_id
                )

                order.user_id = data.user_id
                order.vehicle_id = vehicle.id
                order.start_date = data.start_date
                order.end_date = data.end_date
                order.rental_days = quote.days
                order.total_price = quote.total
                order.deposit_amount = quote.deposit
                order.remaining_amount = quote.remaining
                order.order_status = quote.status.value
                # Optional fields are only overwritten when supplied
                if data.payment_method:
                    order.payment_method = data.payment_method.value
                if data.admin_notes:
                    order.admin_notes = data.admin_notes
                if data.pickup_location:
                    order.pickup_location = data.pickup_location
                if data.return_location:
                    order.return_location = data.return_location

                await self.db.commit()
            except Exception:
                await self.db.rollback()
                raise

        logger.info("Order %s updated: vehicle %s, status %s", order_id, vehicle.id, order.order_status)
        return await self.get_order(order_id)

    async def delete_order(self, order_id: int) -> None:
        order = await self.db.get(Order, order_id)
        if not order:
            raise NotFoundError("Order not found")
        await self.db.delete(order)
        await self.db.commit()
        logger.info("Order %s deleted", order_id)
