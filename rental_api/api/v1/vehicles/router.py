from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.v1.vehicles.schemas import (
    CreateVehicleRequest,
    UpdateVehicleRequest,
    VehicleResponse,
)
from rental_api.api.v1.vehicles.service import VehicleService, parse_date_window
from rental_api.core.deps import get_db, get_current_staff_user
from rental_api.core.exceptions import AppException
from rental_api.models.user import User

router = APIRouter(dependencies=[Depends(get_current_staff_user)])


@router.get(
    "/",
    response_model=List[VehicleResponse],
    summary="List vehicles available for a period",
    description=(
        "Generally-available vehicles with no blocking order between startDate and endDate. "
        "Pass excludeOrderId when editing an order so it does not block its own vehicle. "
        "Without dates all generally-available vehicles are returned. Admin/owner only."
    ),
)
async def get_available_vehicles(
    start_date: Optional[str] = Query(None, alias="startDate", description="ISO-8601 start date"),
    end_date: Optional[str] = Query(None, alias="endDate", description="ISO-8601 end date"),
    exclude_order_id: Optional[int] = Query(None, alias="excludeOrderId", description="Order to ignore"),
    db: AsyncSession = Depends(get_db),
):
    window = parse_date_window(start_date, end_date)
    vehicle_service = VehicleService(db)
    vehicles = await vehicle_service.list_available_vehicles(window=window, exclude_order_id=exclude_order_id)
    return [VehicleResponse.model_validate(vehicle) for vehicle in vehicles]


@router.post(
    "/",
    response_model=VehicleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new vehicle",
    description="Slug and license plate must be unique. Owner defaults to the caller.",
)
async def create_vehicle(
    vehicle_data: CreateVehicleRequest,
    current_user: User = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
):
    vehicle_service = VehicleService(db)
    vehicle = await vehicle_service.create_vehicle(vehicle_data, current_user)
    return VehicleResponse.model_validate(vehicle)


@router.get(
    "/{vehicle_id}",
    response_model=VehicleResponse,
    summary="Get vehicle by ID",
)
async def get_vehicle_by_id(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
):
    vehicle_service = VehicleService(db)
    vehicle = await vehicle_service.get_vehicle_by_id(vehicle_id)
    if not vehicle:
        AppException().raise_404("Vehicle not found")
    return VehicleResponse.model_validate(vehicle)


@router.put(
    "/{vehicle_id}",
    response_model=VehicleResponse,
    summary="Update vehicle",
    description="Update any subset of a vehicle's fields.",
)
async def update_vehicle(
    vehicle_id: int,
    vehicle_data: UpdateVehicleRequest,
    db: AsyncSession = Depends(get_db),
):
    vehicle_service = VehicleService(db)
    vehicle = await vehicle_service.update_vehicle(vehicle_id, vehicle_data)
    return VehicleResponse.model_validate(vehicle)


@router.delete(
    "/{vehicle_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete vehicle",
    description="Vehicles referenced by any order cannot be deleted.",
)
async def delete_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
):
    vehicle_service = VehicleService(db)
    await vehicle_service.delete_vehicle(vehicle_id)
    return {"message": "Vehicle deleted successfully"}
