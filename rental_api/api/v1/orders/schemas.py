from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from rental_api.core.availability import coerce_date
from rental_api.models.enums import OrderStatus, PaymentMethod


class RentalPeriod(BaseModel):
    """Start and end of a rental. Full ISO datetimes are truncated to their date."""
    start_date: date = Field(..., description="First rental day (ISO-8601)")
    end_date: date = Field(..., description="Last rental day (ISO-8601), must be after start_date")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_iso_date(cls, value):
        if value is None:
            return value
        return coerce_date(value)


class CreateOrderRequest(RentalPeriod):
    """Booking placed by the logged-in renter. Price is computed from the vehicle's daily rate."""
    vehicle_id: int
    payment_method: PaymentMethod
    pickup_location: str = Field(..., min_length=1)
    return_location: str = Field(..., min_length=1)
    deposit_amount: Optional[float] = Field(None, ge=0, description="Upfront payment; equal to the total marks the order PAID")


class AdminCreateOrderRequest(RentalPeriod):
    user_id: int
    vehicle_id: int
    deposit_amount: Optional[float] = Field(None, ge=0)
    payment_method: Optional[PaymentMethod] = None
    order_status: Optional[OrderStatus] = Field(
        None, description="Explicit status; defaults to PAID for a full deposit, otherwise PENDING_REVIEW"
    )
    admin_notes: Optional[str] = None
    pickup_location: Optional[str] = None
    return_location: Optional[str] = None


class AdminUpdateOrderRequest(AdminCreateOrderRequest):
    order_status: OrderStatus


class QuoteRequest(RentalPeriod):
    vehicle_id: int
    deposit_amount: Optional[float] = Field(None, ge=0)


class QuoteResponse(BaseModel):
    vehicle_id: int
    start_date: date
    end_date: date
    rental_days: int
    daily_rate: float
    total_price: float
    deposit_amount: float
    remaining_amount: float
    order_status: OrderStatus
    available: bool = Field(..., description="False if the vehicle is unlisted or already booked in the period")


class OrderUserSummary(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class OrderVehicleSummary(BaseModel):
    id: int
    name: str
    slug: str
    license_plate: str
    daily_rate: float
    main_image_url: str

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    user_id: int
    vehicle_id: int
    start_date: date
    end_date: date
    rental_days: int
    total_price: float
    deposit_amount: float
    remaining_amount: float
    payment_method: Optional[PaymentMethod]
    order_status: OrderStatus
    admin_notes: Optional[str]
    pickup_location: Optional[str]
    return_location: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[OrderUserSummary] = None
    vehicle: Optional[OrderVehicleSummary] = None

    class Config:
        from_attributes = True
