"""
Filtering and reporting views

Stateless projections over the current admissions and rooms. Nothing here
writes; every function can be recomputed at any time from the collections it
is given.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Literal, Optional, Tuple, Union
import enum

from pydantic import BaseModel, model_validator

from vetclinic.domain.admissions.models import Admission, AdmissionStatus
from vetclinic.domain.billing.calculator import to_money
from vetclinic.domain.rooms.models import Room, RoomType

ALL = "all"

Predicate = Callable[[Admission], bool]


class DateRange(str, enum.Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class AdmissionFilters(BaseModel):
    """Active filters; a value of "all" adds no condition"""
    status: Union[AdmissionStatus, Literal["all"]] = ALL
    doctor_id: str = ALL
    room_type: Union[RoomType, Literal["all"]] = ALL
    date_range: DateRange = DateRange.ALL
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @model_validator(mode="after")
    def check_dates(self) -> "AdmissionFilters":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must be on or before date_to")
        return self


@dataclass(frozen=True)
class AdmissionStats:
    total_active: int
    total_rooms: int
    occupied_rooms: int
    available_rooms: int
    today_admissions: int
    active_bill_total: Decimal


def date_window(date_range: DateRange, today: date) -> Tuple[Optional[date], Optional[date]]:
    """Inclusive admission-date window; weeks start on Monday"""
    if date_range == DateRange.TODAY:
        return today, today
    if date_range == DateRange.WEEK:
        return today - timedelta(days=today.weekday()), today
    if date_range == DateRange.MONTH:
        return today.replace(day=1), today
    return None, None


def _room_type_of(admission: Admission, rooms_by_number: Dict[str, Room]) -> Optional[RoomType]:
    room = rooms_by_number.get(admission.room_number)
    return room.room_type if room is not None else None


def build_predicates(
    filters: AdmissionFilters,
    rooms_by_number: Dict[str, Room],
    today: date
) -> List[Predicate]:
    predicates: List[Predicate] = []

    if filters.status != ALL:
        predicates.append(lambda a: a.status == filters.status)

    if filters.doctor_id != ALL:
        predicates.append(lambda a: a.doctor_id == filters.doctor_id)

    if filters.room_type != ALL:
        predicates.append(lambda a: _room_type_of(a, rooms_by_number) == filters.room_type)

    start, end = date_window(filters.date_range, today)
    if start is not None:
        predicates.append(lambda a: start <= a.admission_date <= end)

    if filters.date_from:
        predicates.append(lambda a: a.admission_date >= filters.date_from)

    if filters.date_to:
        predicates.append(lambda a: a.admission_date <= filters.date_to)

    return predicates


def filter_admissions(
    admissions: Iterable[Admission],
    rooms: Iterable[Room],
    filters: AdmissionFilters,
    today: date
) -> List[Admission]:
    """Admissions matching every active filter"""
    rooms_by_number = {room.number: room for room in rooms}
    predicates = build_predicates(filters, rooms_by_number, today)
    return [a for a in admissions if all(p(a) for p in predicates)]


def admission_stats(admissions: Iterable[Admission], rooms: Iterable[Room], today: date) -> AdmissionStats:
    admissions = list(admissions)
    rooms = list(rooms)
    active = [a for a in admissions if a.status == AdmissionStatus.ACTIVE]
    occupied = sum(1 for r in rooms if r.occupied > 0)

    return AdmissionStats(
        total_active=len(active),
        total_rooms=len(rooms),
        occupied_rooms=occupied,
        available_rooms=sum(1 for r in rooms if r.occupied < r.capacity),
        today_admissions=sum(1 for a in admissions if a.admission_date == today),
        active_bill_total=to_money(sum((to_money(a.total_bill) for a in active), Decimal("0"))),
    )
