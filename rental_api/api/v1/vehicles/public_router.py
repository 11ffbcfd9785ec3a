from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.v1.vehicles.schemas import PublicVehicleResponse, VehicleResponse
from rental_api.api.v1.vehicles.service import VehicleService, parse_date_window
from rental_api.core.deps import get_db
from rental_api.core.exceptions import AppException
from rental_api.models.enums import FuelType, TransmissionType, VehicleType

router = APIRouter()


@router.get(
    "/",
    response_model=List[PublicVehicleResponse],
    summary="Browse vehicles",
    description=(
        "Vehicles open for rent, optionally only those free between startDate and endDate, "
        "filtered by type, transmission, fuel and a case-insensitive search on name or license plate."
    ),
)
async def browse_vehicles(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    vehicle_type: Optional[VehicleType] = Query(None, alias="type"),
    transmission: Optional[TransmissionType] = Query(None),
    fuel: Optional[FuelType] = Query(None),
    search: Optional[str] = Query(None, description="Matches vehicle name or license plate"),
    db: AsyncSession = Depends(get_db),
):
    window = parse_date_window(start_date, end_date)
    vehicle_service = VehicleService(db)
    vehicles = await vehicle_service.list_available_vehicles(
        window=window,
        vehicle_type=vehicle_type,
        transmission=transmission,
        fuel=fuel,
        search=search,
    )
    return [PublicVehicleResponse.model_validate(vehicle) for vehicle in vehicles]


@router.get(
    "/{slug}",
    response_model=VehicleResponse,
    summary="Get vehicle by slug",
)
async def get_vehicle_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    vehicle_service = VehicleService(db)
    vehicle = await vehicle_service.get_vehicle_by_slug(slug)
    if not vehicle:
        AppException().raise_404("Vehicle not found")
    return VehicleResponse.model_validate(vehicle)
