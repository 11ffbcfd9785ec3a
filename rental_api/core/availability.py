"""
Booking availability rules: interval overlap, blocking statuses and rental pricing.

Dates are calendar dates. An order holds its vehicle from start_date through
end_date inclusive, so an order ending on the 15th blocks a new order starting
on the 15th (no same-day handover).
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

from rental_api.core.exceptions import RentalValidationError
from rental_api.models.enums import OrderStatus

ONE_DAY = timedelta(days=1)

# Orders in these statuses no longer hold the vehicle
NON_BLOCKING_STATUSES = frozenset(
    {OrderStatus.canceled, OrderStatus.rejected, OrderStatus.completed}
)
NON_BLOCKING_STATUS_VALUES = tuple(sorted(s.value for s in NON_BLOCKING_STATUSES))


def coerce_date(value: Union[str, date, datetime]) -> date:
    """
    Coerce 'YYYY-MM-DD', an ISO datetime string, a datetime or a date to a date.
    Offset-aware datetimes are taken in UTC before dropping the time.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("date must not be empty")
        if "T" in text or " " in text:
            # Python < 3.11 does not parse a trailing 'Z'
            return coerce_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
        return date.fromisoformat(text)
    raise ValueError(f"Unsupported date: {value!r}")


def overlaps(existing_start: date, existing_end: date, candidate_start: date, candidate_end: date) -> bool:
    """Inclusive interval intersection. Touching boundaries count as overlapping."""
    return existing_start <= candidate_end and existing_end >= candidate_start


def is_blocking(status: Union[OrderStatus, str]) -> bool:
    """True if an order in this status keeps its vehicle reserved."""
    return OrderStatus(status) not in NON_BLOCKING_STATUSES


def validate_rental_period(start: date, end: date) -> None:
    if start >= end:
        raise RentalValidationError("Start date must be before end date")


def count_rental_days(start: date, end: date) -> int:
    """Whole rental days between start and end, rounded up."""
    return math.ceil((end - start) / ONE_DAY)


@dataclass(frozen=True)
class RentalQuote:
    days: int
    daily_rate: float
    total: float
    deposit: float
    remaining: float
    status: OrderStatus


def compute_rental(
    daily_rate: float,
    start: date,
    end: date,
    deposit: Optional[float] = None,
    status: Optional[Union[OrderStatus, str]] = None,
) -> RentalQuote:
    """
    Price a rental and derive its initial status.

    An explicit status always wins. Otherwise a deposit covering the whole
    total marks the order PAID, anything less leaves it PENDING_REVIEW. The
    promotion is one-way: nothing here moves an order back out of PAID.
    """
    validate_rental_period(start, end)
    days = count_rental_days(start, end)
    if daily_rate is None or daily_rate <= 0:
        raise RentalValidationError("Vehicle daily rate must be greater than zero")
    total = days * float(daily_rate)
    if days <= 0 or total <= 0:
        raise RentalValidationError("Rental total must be greater than zero")

    deposit_amount = float(deposit) if deposit is not None else 0.0
    if deposit_amount < 0:
        raise RentalValidationError("Deposit amount cannot be negative")
    if deposit_amount > total:
        raise RentalValidationError("Deposit amount cannot exceed total price")

    if status is not None:
        final_status = OrderStatus(status)
    elif deposit_amount == total:
        final_status = OrderStatus.paid
    else:
        final_status = OrderStatus.pending_review

    return RentalQuote(
        days=days,
        daily_rate=float(daily_rate),
        total=total,
        deposit=deposit_amount,
        remaining=total - deposit_amount,
        status=final_status,
    )
