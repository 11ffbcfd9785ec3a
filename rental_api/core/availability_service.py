"""
Conflict queries against stored orders, and the per-vehicle write lock.

Checking for a conflict and writing the order must happen as one critical
section, otherwise two requests for the same window can both pass the check.
Writers therefore hold vehicle_locks.lock(vehicle_id) for the whole
check-and-write, and inside it lock the vehicle row with SELECT ... FOR UPDATE
so that writers in other processes are serialised by the database as well.
"""
import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, List, Optional, Set

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.core.availability import NON_BLOCKING_STATUS_VALUES, validate_rental_period
from rental_api.models.order import Order
from rental_api.models.vehicle import Vehicle

logger = logging.getLogger(__name__)


def blocking_overlap_clause(start: date, end: date, exclude_order_id: Optional[int] = None):
    """SQL form of overlaps() + is_blocking() against the orders table."""
    conditions = [
        Order.start_date <= end,
        Order.end_date >= start,
        Order.order_status.notin_(NON_BLOCKING_STATUS_VALUES),
    ]
    if exclude_order_id is not None:
        conditions.append(Order.id != exclude_order_id)
    return and_(*conditions)


class VehicleLocks:
    """asyncio locks keyed by vehicle id. Unused locks are dropped automatically."""

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _get(self, vehicle_id: int) -> asyncio.Lock:
        lock = self._locks.get(vehicle_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[vehicle_id] = lock
        return lock

    @asynccontextmanager
    async def lock(self, vehicle_id: int) -> AsyncIterator[None]:
        lock = self._get(vehicle_id)
        async with lock:
            yield

    def clear(self) -> None:
        self._locks.clear()


vehicle_locks = VehicleLocks()


class AvailabilityService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_conflicts(
        self,
        vehicle_id: int,
        start: date,
        end: date,
        exclude_order_id: Optional[int] = None,
    ) -> List[int]:
        """Ids of blocking orders on this vehicle whose period overlaps [start, end]."""
        validate_rental_period(start, end)
        result = await self.db.execute(
            select(Order.id)
            .where(Order.vehicle_id == vehicle_id)
            .where(blocking_overlap_clause(start, end, exclude_order_id))
            .order_by(Order.id)
        )
        conflicts = list(result.scalars().all())
        if conflicts:
            logger.debug(
                "Vehicle %s has conflicting orders %s for %s..%s", vehicle_id, conflicts, start, end
            )
        return conflicts

    async def is_vehicle_free(
        self,
        vehicle_id: int,
        start: date,
        end: date,
        exclude_order_id: Optional[int] = None,
    ) -> bool:
        return not await self.find_conflicts(vehicle_id, start, end, exclude_order_id)

    async def find_unavailable_vehicle_ids(
        self,
        start: date,
        end: date,
        exclude_order_id: Optional[int] = None,
    ) -> Set[int]:
        """Vehicles holding at least one blocking order that overlaps [start, end]."""
        validate_rental_period(start, end)
        result = await self.db.execute(
            select(Order.vehicle_id).where(blocking_overlap_clause(start, end, exclude_order_id)).distinct()
        )
        return set(result.scalars().all())

    async def lock_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        """Load the vehicle row FOR UPDATE. No-op locking on SQLite."""
        result = await self.db.execute(
            select(Vehicle).where(Vehicle.id == vehicle_id).with_for_update()
        )
        return result.scalar_one_or_none()
