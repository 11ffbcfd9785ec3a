from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from rental_api.models.enums import FuelType, TransmissionType, VehicleType


class CreateVehicleRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Display name, e.g. 'Toyota Avanza 2023'")
    slug: str = Field(..., min_length=1, description="Unique URL-friendly identifier")
    description: Optional[str] = Field(None, description="Short description")
    type: VehicleType = Field(..., description="Vehicle body type")
    capacity: int = Field(..., gt=0, description="Passenger capacity")
    transmission_type: TransmissionType
    fuel_type: FuelType
    daily_rate: float = Field(..., gt=0, description="Rental price per day")
    late_fee_per_day: float = Field(0.0, ge=0, description="Fee per day of late return")
    main_image_url: Optional[str] = Field(None, description="Image URL; a placeholder is used when empty")
    is_available: bool = Field(True, description="General availability, independent of bookings")
    license_plate: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    address: Optional[str] = None
    owner_id: Optional[int] = Field(None, description="Owning user; defaults to the caller")


class UpdateVehicleRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    type: Optional[VehicleType] = None
    capacity: Optional[int] = Field(None, gt=0)
    transmission_type: Optional[TransmissionType] = None
    fuel_type: Optional[FuelType] = None
    daily_rate: Optional[float] = Field(None, gt=0)
    late_fee_per_day: Optional[float] = Field(None, ge=0)
    main_image_url: Optional[str] = None
    is_available: Optional[bool] = None
    license_plate: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    owner_id: Optional[int] = None


class OwnerSummary(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class VehicleResponse(BaseModel):
    id: int
    owner_id: int
    name: str
    slug: str
    description: Optional[str]
    type: VehicleType
    capacity: int
    transmission_type: TransmissionType
    fuel_type: FuelType
    daily_rate: float
    late_fee_per_day: float
    main_image_url: str
    is_available: bool
    license_plate: str
    city: str
    address: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner: Optional[OwnerSummary] = None

    class Config:
        from_attributes = True


class PublicVehicleResponse(BaseModel):
    """Fields shown to anonymous visitors browsing the catalogue."""
    id: int
    name: str
    slug: str
    type: VehicleType
    capacity: int
    transmission_type: TransmissionType
    fuel_type: FuelType
    daily_rate: float
    main_image_url: str
    city: str
    description: Optional[str]

    class Config:
        from_attributes = True
