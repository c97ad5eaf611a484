"""
Room Registry

Owns room identity, capacity and rates, and is the only place occupancy
changes. `reserve` and `release` join the caller's transaction and expect the
caller to hold the room lock; the conditional update they run keeps the
check-and-increment atomic in the database as well.
"""

from decimal import Decimal
from typing import Optional, List
import logging

from sqlalchemy.orm import Session

from vetclinic.core.exceptions import (
    ConflictError, ErrorHandler, RoomFullError,
    RoomNotFoundError, ValidationError
)
from vetclinic.domain.billing.calculator import to_money
from vetclinic.domain.rooms.models import Room, RoomType
from vetclinic.domain.rooms.repository import RoomRepository, RoomStore

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Service layer for rooms and their occupancy"""

    def __init__(self, db: Session, store: Optional[RoomStore] = None):
        self.db = db
        self.room_repo = store or RoomRepository(db)

    def find_available(self, room_type: Optional[RoomType] = None) -> List[Room]:
        """Rooms with at least one free slot, optionally of one type"""
        return self.room_repo.list(room_type=room_type, available_only=True)

    def list_rooms(self, room_type: Optional[RoomType] = None) -> List[Room]:
        return self.room_repo.list(room_type=room_type)

    def get_room(self, room_number: str) -> Room:
        room = self.room_repo.get_by_number(room_number)
        if room is None:
            raise RoomNotFoundError(room_number)
        return room

    def reserve(self, room_number: str) -> Decimal:
        """Take one slot and return the daily rate snapshot for the new stay"""
        if not self.room_repo.try_increment(room_number):
            room = self.room_repo.get_by_number(room_number)
            if room is None:
                raise RoomNotFoundError(room_number)
            logger.warning(
                f"Reservation rejected, room {room_number} full ({room.occupied}/{room.capacity})"
            )
            raise RoomFullError(room_number, room.capacity)

        room = self.room_repo.get_by_number(room_number)
        logger.debug(f"Reserved slot in room {room_number} ({room.occupied}/{room.capacity})")
        return to_money(room.daily_rate)

    def release(self, room_number: str) -> None:
        """Give one slot back, floored at zero"""
        if self.room_repo.try_decrement(room_number):
            return

        if self.room_repo.get_by_number(room_number) is None:
            raise RoomNotFoundError(room_number)
        # An active admission always holds a slot, so this means the counts drifted.
        logger.error(f"Occupancy underflow on room {room_number}: release requested with occupied=0")

    def add_room(
        self,
        number: str,
        room_type: RoomType,
        capacity: int,
        daily_rate: Decimal
    ) -> Room:
        """Register a new room"""
        number = (number or "").strip()
        if not number:
            raise ValidationError("Room number is required", details={"field": "number"})
        if capacity < 1:
            raise ValidationError("Room capacity must be at least 1", details={"capacity": capacity})
        if Decimal(daily_rate) <= 0:
            raise ValidationError("Daily rate must be greater than zero", details={"daily_rate": str(daily_rate)})

        if self.room_repo.get_by_number(number) is not None:
            raise ConflictError(
                f"Room {number} already exists",
                details={"room_number": number},
                error_code="ROOM_EXISTS"
            )

        with ErrorHandler("add room", self.db):
            room = self.room_repo.add(Room(
                number=number,
                room_type=room_type,
                capacity=capacity,
                occupied=0,
                daily_rate=to_money(daily_rate),
            ))
            self.db.commit()

        logger.info(f"Room {number} added ({room_type.value}, capacity {capacity})")
        return room

    def update_daily_rate(self, room_number: str, daily_rate: Decimal) -> Room:
        """Change the rate for future admissions; open stays keep their snapshot"""
        if Decimal(daily_rate) <= 0:
            raise ValidationError("Daily rate must be greater than zero", details={"daily_rate": str(daily_rate)})

        room = self.get_room(room_number)
        with ErrorHandler("update room rate", self.db):
            room.daily_rate = to_money(daily_rate)
            self.db.commit()
        return room

