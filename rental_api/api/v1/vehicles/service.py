import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rental_api.api.v1.vehicles.schemas import CreateVehicleRequest, UpdateVehicleRequest
from rental_api.core.availability import coerce_date, validate_rental_period
from rental_api.core.availability_service import AvailabilityService
from rental_api.core.exceptions import ConflictError, NotFoundError, RentalValidationError
from rental_api.models.enums import FuelType, TransmissionType, VehicleType
from rental_api.models.order import Order
from rental_api.models.user import User
from rental_api.models.vehicle import PLACEHOLDER_IMAGE_URL, Vehicle

logger = logging.getLogger(__name__)


def escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def parse_date_window(
    start_date: Optional[str],
    end_date: Optional[str],
) -> Optional[Tuple[date, date]]:
    """Turn the startDate/endDate query pair into a validated window, or None if both are absent."""
    if not start_date and not end_date:
        return None
    if not start_date or not end_date:
        raise RentalValidationError("Both startDate and endDate are required to filter by availability")
    try:
        start = coerce_date(start_date)
        end = coerce_date(end_date)
    except ValueError:
        raise RentalValidationError("Invalid startDate or endDate") from None
    validate_rental_period(start, end)
    return start, end


class VehicleService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.availability = AvailabilityService(db)

    async def _ensure_unique(self, slug: Optional[str], license_plate: Optional[str], exclude_id: Optional[int] = None):
        clauses = []
        if slug:
            clauses.append(Vehicle.slug == slug)
        if license_plate:
            clauses.append(Vehicle.license_plate == license_plate)
        if not clauses:
            return
        query = select(Vehicle.id).where(or_(*clauses))
        if exclude_id is not None:
            query = query.where(Vehicle.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("Slug or license plate is already registered")

    async def _ensure_owner(self, owner_id: int) -> None:
        if await self.db.get(User, owner_id) is None:
            raise NotFoundError("Owner not found")

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent write claimed the slug or plate after our check
            await self.db.rollback()
            raise ConflictError("Slug or license plate is already registered")

    async def create_vehicle(self, vehicle_data: CreateVehicleRequest, current_user: User) -> Vehicle:
        owner_id = vehicle_data.owner_id or current_user.id
        await self._ensure_owner(owner_id)
        await self._ensure_unique(vehicle_data.slug, vehicle_data.license_plate)

        new_vehicle = Vehicle(
            owner_id=owner_id,
            name=vehicle_data.name,
            slug=vehicle_data.slug,
            description=vehicle_data.description,
            type=vehicle_data.type.value,
            capacity=vehicle_data.capacity,
            transmission_type=vehicle_data.transmission_type.value,
            fuel_type=vehicle_data.fuel_type.value,
            daily_rate=vehicle_data.daily_rate,
            late_fee_per_day=vehicle_data.late_fee_per_day,
            main_image_url=vehicle_data.main_image_url or PLACEHOLDER_IMAGE_URL,
            is_available=vehicle_data.is_available,
            license_plate=vehicle_data.license_plate,
            city=vehicle_data.city,
            address=vehicle_data.address,
        )
        self.db.add(new_vehicle)
        await self._commit()
        logger.info("Vehicle %s (%s) created for owner %s", new_vehicle.id, new_vehicle.slug, owner_id)
        return await self.get_vehicle_by_id(new_vehicle.id)

    async def get_vehicle_by_id(self, vehicle_id: int) -> Optional[Vehicle]:
        result = await self.db.execute(
            select(Vehicle)
            .options(selectinload(Vehicle.owner))
            .where(Vehicle.id == vehicle_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_vehicle_by_slug(self, slug: str) -> Optional[Vehicle]:
        result = await self.db.execute(
            select(Vehicle).options(selectinload(Vehicle.owner)).where(Vehicle.slug == slug)
        )
        return result.scalar_one_or_none()

    async def list_available_vehicles(
        self,
        window: Optional[Tuple[date, date]] = None,
        exclude_order_id: Optional[int] = None,
        vehicle_type: Optional[VehicleType] = None,
        transmission: Optional[TransmissionType] = None,
        fuel: Optional[FuelType] = None,
        search: Optional[str] = None,
    ) -> List[Vehicle]:
        """
        Generally-available vehicles, minus those with a blocking order in the window.
        Without a window every generally-available vehicle is returned.
        """
        query = select(Vehicle).options(selectinload(Vehicle.owner)).where(Vehicle.is_available.is_(True))

        if window is not None:
            start, end = window
            unavailable = await self.availability.find_unavailable_vehicle_ids(start, end, exclude_order_id)
            if unavailable:
                query = query.where(Vehicle.id.notin_(unavailable))

        if vehicle_type:
            query = query.where(Vehicle.type == vehicle_type.value)
        if transmission:
            query = query.where(Vehicle.transmission_type == transmission.value)
        if fuel:
            query = query.where(Vehicle.fuel_type == fuel.value)
        if search:
            pattern = f"%{escape_like(search.strip().lower())}%"
            query = query.where(
                or_(
                    func.lower(Vehicle.name).like(pattern, escape="\\"),
                    func.lower(Vehicle.license_plate).like(pattern, escape="\\"),
                )
            )

        result = await self.db.execute(query.order_by(Vehicle.name.asc(), Vehicle.id.asc()))
        return list(result.scalars().all())

    async def update_vehicle(self, vehicle_id: int, vehicle_data: UpdateVehicleRequest) -> Vehicle:
        vehicle = await self.db.get(Vehicle, vehicle_id)
        if not vehicle:
            raise NotFoundError("Vehicle not found")

        update_data = vehicle_data.model_dump(exclude_unset=True)
        await self._ensure_unique(update_data.get("slug"), update_data.get("license_plate"), exclude_id=vehicle_id)
        if update_data.get("owner_id") is not None:
            await self._ensure_owner(update_data["owner_id"])
        if "main_image_url" in update_data and not update_data["main_image_url"]:
            update_data["main_image_url"] = PLACEHOLDER_IMAGE_URL

        for field, value in update_data.items():
            if value is None and field not in ("description", "address"):
                continue
            if isinstance(value, (VehicleType, TransmissionType, FuelType)):
                value = value.value
            setattr(vehicle, field, value)

        await self._commit()
        logger.info("Vehicle %s updated", vehicle_id)
        return await self.get_vehicle_by_id(vehicle_id)

    async def delete_vehicle(self, vehicle_id: int) -> None:
        vehicle = await self.db.get(Vehicle, vehicle_id)
        if not vehicle:
            raise NotFoundError("Vehicle not found")

        order_result = await self.db.execute(select(Order.id).where(Order.vehicle_id == vehicle_id).limit(1))
        if order_result.scalar_one_or_none() is not None:
            raise ConflictError("Cannot delete vehicle that has associated orders")

        await self.db.delete(vehicle)
        await self.db.commit()
        logger.info("Vehicle %s deleted", vehicle_id)
