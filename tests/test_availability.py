"""
Pure booking rules: interval overlap, blocking statuses, date coercion and
rental pricing. No database involved.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from rental_api.core.availability import (
    NON_BLOCKING_STATUSES,
    coerce_date,
    compute_rental,
    count_rental_days,
    is_blocking,
    overlaps,
    validate_rental_period,
)
from rental_api.core.exceptions import RentalValidationError
from rental_api.models.enums import OrderStatus


def d(text):
    return date.fromisoformat(text)


@pytest.mark.parametrize(
    "existing, candidate, expected",
    [
        (("2024-06-10", "2024-06-15"), ("2024-06-12", "2024-06-20"), True),
        (("2024-06-10", "2024-06-15"), ("2024-06-01", "2024-06-11"), True),
        (("2024-06-10", "2024-06-15"), ("2024-06-11", "2024-06-14"), True),
        (("2024-06-10", "2024-06-15"), ("2024-06-01", "2024-06-30"), True),
        (("2024-06-10", "2024-06-15"), ("2024-06-16", "2024-06-20"), False),
        (("2024-06-10", "2024-06-15"), ("2024-06-01", "2024-06-09"), False),
    ],
)
def test_overlaps(existing, candidate, expected):
    assert overlaps(d(existing[0]), d(existing[1]), d(candidate[0]), d(candidate[1])) is expected


def test_overlaps_is_symmetric():
    a = (d("2024-06-10"), d("2024-06-15"))
    b = (d("2024-06-14"), d("2024-06-18"))
    assert overlaps(*a, *b) == overlaps(*b, *a)


def test_touching_boundary_counts_as_overlap():
    # Same-day handover is not allowed
    assert overlaps(d("2024-06-10"), d("2024-06-15"), d("2024-06-15"), d("2024-06-20"))
    assert overlaps(d("2024-06-15"), d("2024-06-20"), d("2024-06-10"), d("2024-06-15"))


def test_non_blocking_statuses():
    assert NON_BLOCKING_STATUSES == {OrderStatus.canceled, OrderStatus.rejected, OrderStatus.completed}
    for status in ("CANCELED", "REJECTED", "COMPLETED"):
        assert not is_blocking(status)
    for status in ("PENDING_REVIEW", "APPROVED", "PAID", "ACTIVE"):
        assert is_blocking(status)


def test_is_blocking_rejects_unknown_status():
    with pytest.raises(ValueError):
        is_blocking("LOST")


def test_coerce_date_accepts_dates_datetimes_and_iso_strings():
    assert coerce_date("2024-06-01") == date(2024, 6, 1)
    assert coerce_date("2024-06-01T15:30:00Z") == date(2024, 6, 1)
    assert coerce_date("2024-06-01 08:00:00") == date(2024, 6, 1)
    assert coerce_date(datetime(2024, 6, 1, 23, 59)) == date(2024, 6, 1)
    assert coerce_date(date(2024, 6, 1)) == date(2024, 6, 1)


def test_coerce_date_takes_offset_datetimes_in_utc():
    assert coerce_date("2024-06-01T23:00:00-05:00") == date(2024, 6, 2)
    assert coerce_date("2024-06-02T01:00:00+07:00") == date(2024, 6, 1)
    assert coerce_date(datetime(2024, 6, 1, 23, 0, tzinfo=timezone(timedelta(hours=-5)))) == date(2024, 6, 2)


@pytest.mark.parametrize("bad", ["", "tomorrow", "2024-13-01", 20240601])
def test_coerce_date_rejects_garbage(bad):
    with pytest.raises(ValueError):
        coerce_date(bad)


def test_validate_rental_period_requires_start_before_end():
    validate_rental_period(d("2024-06-01"), d("2024-06-02"))
    with pytest.raises(RentalValidationError, match="Start date must be before end date"):
        validate_rental_period(d("2024-06-02"), d("2024-06-02"))
    with pytest.raises(RentalValidationError):
        validate_rental_period(d("2024-06-05"), d("2024-06-01"))


def test_count_rental_days():
    assert count_rental_days(d("2024-06-01"), d("2024-06-04")) == 3
    assert count_rental_days(d("2024-06-01"), d("2024-06-02")) == 1


def test_compute_rental_without_deposit():
    quote = compute_rental(350000, d("2024-06-01"), d("2024-06-04"))
    assert quote.days == 3
    assert quote.total == 1050000
    assert quote.deposit == 0
    assert quote.remaining == 1050000
    assert quote.status == OrderStatus.pending_review


def test_compute_rental_partial_deposit_stays_pending():
    quote = compute_rental(350000, d("2024-06-01"), d("2024-06-04"), deposit=315000)
    assert quote.remaining == 735000
    assert quote.status == OrderStatus.pending_review


def test_compute_rental_full_deposit_marks_paid():
    quote = compute_rental(350000, d("2024-06-01"), d("2024-06-04"), deposit=1050000)
    assert quote.remaining == 0
    assert quote.status == OrderStatus.paid


def test_compute_rental_explicit_status_wins():
    quote = compute_rental(350000, d("2024-06-01"), d("2024-06-04"), deposit=1050000, status="APPROVED")
    assert quote.status == OrderStatus.approved

    quote = compute_rental(350000, d("2024-06-01"), d("2024-06-04"), deposit=0, status=OrderStatus.paid)
    assert quote.status == OrderStatus.paid


def test_compute_rental_total_is_days_times_rate():
    quote = compute_rental(125.5, d("2024-01-30"), d("2024-02-02"))
    assert quote.days == 3
    assert quote.total == pytest.approx(376.5)
    assert quote.remaining == quote.total - quote.deposit


@pytest.mark.parametrize(
    "kwargs, message",
    [
        (dict(daily_rate=0), "daily rate"),
        (dict(daily_rate=-10), "daily rate"),
        (dict(deposit=-1), "cannot be negative"),
        (dict(deposit=2000000), "cannot exceed total"),
    ],
)
def test_compute_rental_rejects_invalid_amounts(kwargs, message):
    args = dict(daily_rate=350000, start=d("2024-06-01"), end=d("2024-06-04"))
    args.update(kwargs)
    with pytest.raises(RentalValidationError, match=message):
        compute_rental(**args)


def test_compute_rental_rejects_inverted_period():
    with pytest.raises(RentalValidationError):
        compute_rental(350000, d("2024-06-04"), d("2024-06-01"))
