"""
MedTrack Backend: Medication Status Calculator
================================================

What:  Derives a medication's status, remaining units and days until depletion.
How:   Pure arithmetic over the record's four static fields and an explicit
       evaluation date. No clock reads, no I/O, no shared state.
Who:   Called by MedicationService every time a record is returned to a client.

Algorithm:
    1. today > expiry_date               → EXPIRED, 0 remaining, 0 days to end
    2. days_passed = max(today - purchase_date, 0) in whole days
    3. consumed    = days_passed * units_per_day
    4. remaining   = max(total_units - consumed, 0)
    5. days_to_end = ceil(remaining / units_per_day), or None when the rate is 0
    6. remaining <= 0 → OUT_OF_STOCK, otherwise ACTIVE

    The expiry date itself is still usable; a record expires the day after.

Inverted ranges (purchase_date after expiry_date) are not checked here.
MedicationService refuses to store them.
"""

import enum
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol, Union

DateLike = Union[date, datetime]


class MedicationStatus(str, enum.Enum):
    """Lifecycle state of a medication on a given day."""

    ACTIVE = "active"
    OUT_OF_STOCK = "out_of_stock"
    EXPIRED = "expired"


@dataclass(frozen=True)
class StatusResult:
    """
    Outcome of a single status evaluation.

    days_to_end is None only when the record is not expired and its
    consumption rate is zero (stock never runs out).
    """

    status: MedicationStatus
    remaining_units: int
    days_to_end: Optional[int]
    evaluated_on: date


class MedicationFields(Protocol):
    purchase_date: date
    expiry_date: date
    total_units: int
    units_per_day: int


def _as_date(value: DateLike) -> date:
    # datetime subclasses date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def calculate_status(
    purchase_date: DateLike,
    expiry_date: DateLike,
    total_units: int,
    units_per_day: int,
    today: DateLike,
) -> StatusResult:
    """
    Compute the status of a medication as of ``today``.

    Args:
        purchase_date: Day the medication was acquired.
        expiry_date: Last day the medication is safe to use.
        total_units: Units available at purchase time.
        units_per_day: Consumption rate. Zero is accepted and means the
            stock never depletes (days_to_end is None).
        today: Evaluation date. A datetime is reduced to its calendar date
            in its own timezone.

    Returns:
        StatusResult with the derived status, remaining units and days to end.
    """
    purchased = _as_date(purchase_date)
    expires = _as_date(expiry_date)
    on = _as_date(today)

    if on > expires:
        return StatusResult(
            status=MedicationStatus.EXPIRED,
            remaining_units=0,
            days_to_end=0,
            evaluated_on=on,
        )

    days_passed = max((on - purchased).days, 0)
    consumed = days_passed * units_per_day
    remaining = max(total_units - consumed, 0)

    days_to_end: Optional[int] = None
    if units_per_day > 0:
        # Integer ceiling division
        days_to_end = -(-remaining // units_per_day)

    status = MedicationStatus.OUT_OF_STOCK if remaining <= 0 else MedicationStatus.ACTIVE

    return StatusResult(
        status=status,
        remaining_units=remaining,
        days_to_end=days_to_end,
        evaluated_on=on,
    )


def status_for(record: MedicationFields, today: DateLike) -> StatusResult:
    """Shortcut for evaluating an ORM row or any object with the four fields."""
    return calculate_status(
        purchase_date=record.purchase_date,
        expiry_date=record.expiry_date,
        total_units=record.total_units,
        units_per_day=record.units_per_day,
        today=today,
    )
