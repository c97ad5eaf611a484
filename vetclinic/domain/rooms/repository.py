"""
Rooms Repository Layer

Data access for the room registry. Occupancy is only ever changed through
the conditional updates below, which check and change `occupied` in a
single statement.
"""

from typing import Optional, List, Protocol
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from vetclinic.domain.rooms.models import Room, RoomType


class RoomStore(Protocol):
    """Storage contract the room registry depends on"""

    def add(self, room: Room) -> Room: ...

    def get_by_number(self, number: str) -> Optional[Room]: ...

    def list(self, room_type: Optional[RoomType] = None, available_only: bool = False) -> List[Room]: ...

    def try_increment(self, number: str) -> bool: ...

    def try_decrement(self, number: str) -> bool: ...


class RoomRepository:
    """SQLAlchemy implementation of RoomStore"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, room: Room) -> Room:
        """Stage a new room in the current transaction"""
        self.db.add(room)
        self.db.flush()
        return room

    def get_by_number(self, number: str) -> Optional[Room]:
        """Get room by its display number, always re-reading occupancy"""
        result = self.db.execute(
            select(Room)
            .where(Room.number == number)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    def list(self, room_type: Optional[RoomType] = None, available_only: bool = False) -> List[Room]:
        """List rooms ordered by number"""
        query = select(Room).execution_options(populate_existing=True)

        if room_type:
            query = query.where(Room.room_type == room_type)

        if available_only:
            query = query.where(Room.occupied < Room.capacity)

        result = self.db.execute(query.order_by(Room.number))
        return list(result.scalars().all())

    def try_increment(self, number: str) -> bool:
        """Take one slot if any is free. Returns False when nothing matched."""
        result = self.db.execute(
            update(Room)
            .where(Room.number == number, Room.occupied < Room.capacity)
            .values(occupied=Room.occupied + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def try_decrement(self, number: str) -> bool:
        """Free one slot, never going below zero"""
        result = self.db.execute(
            update(Room)
            .where(Room.number == number, Room.occupied > 0)
            .values(occupied=Room.occupied - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
