"""
Discharge Billing Calculator

Pure functions deriving the amount owed for a stay:

    stay_duration_days = max(1, discharge_date - admission_date in days)
    room_charges       = stay_duration_days * daily_rate
    treatment_charges  = sum of costs of every treatment not Cancelled
    calculated_bill    = room_charges + treatment_charges

A same-day discharge is billed as one full day. Scheduled treatments that
were never completed are still billed. All amounts are Decimal, rounded to
cents with ROUND_HALF_UP.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable
import math

CENT = Decimal("0.01")
SECONDS_PER_DAY = 24 * 60 * 60
CANCELLED = "Cancelled"


def to_money(value: Any) -> Decimal:
    """Coerce a number to a cent-rounded Decimal without float drift"""
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BillBreakdown:
    stay_duration_days: int
    daily_rate: Decimal
    room_charges: Decimal
    treatment_charges: Decimal
    calculated_bill: Decimal


def _status_value(status: Any) -> str:
    return getattr(status, "value", status)


def billable_treatment_total(treatments: Iterable[Any]) -> Decimal:
    """Sum of costs over treatments that are not cancelled"""
    total = Decimal("0")
    for treatment in treatments:
        if _status_value(treatment.status) != CANCELLED:
            total += to_money(treatment.cost)
    return to_money(total)


def stay_duration_days(admission_date: date, discharge_date: date) -> int:
    """Calendar days billed for a stay, minimum one"""
    if discharge_date < admission_date:
        raise ValueError("Discharge date cannot be before admission date")
    return max(1, (discharge_date - admission_date).days)


def _breakdown(days: int, daily_rate: Any, treatments: Iterable[Any]) -> BillBreakdown:
    rate = to_money(daily_rate)
    room_charges = to_money(rate * days)
    treatment_charges = billable_treatment_total(treatments)
    return BillBreakdown(
        stay_duration_days=days,
        daily_rate=rate,
        room_charges=room_charges,
        treatment_charges=treatment_charges,
        calculated_bill=to_money(room_charges + treatment_charges),
    )


def calculate_bill(admission: Any, discharge_date: date) -> BillBreakdown:
    """Final invoice baseline for an admission discharged on `discharge_date`.

    `admission` only needs `admission_date`, `daily_rate` and `treatments`
    (each with `cost` and `status`), so ORM rows and plain snapshots both work.
    """
    days = stay_duration_days(admission.admission_date, discharge_date)
    return _breakdown(days, admission.daily_rate, admission.treatments)


def running_estimate(admission: Any, now: datetime) -> BillBreakdown:
    """Advisory total while the stay is still open.

    Days so far are the elapsed time since admission rounded up, minimum one.
    """
    admitted_at = datetime.combine(admission.admission_date, admission.admission_time)
    elapsed = (now - admitted_at).total_seconds()
    days = max(1, math.ceil(elapsed / SECONDS_PER_DAY))
    return _breakdown(days, admission.daily_rate, admission.treatments)
