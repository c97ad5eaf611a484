from sqlalchemy import Column, String, Integer, Numeric, DateTime, Enum, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from vetclinic.infrastructure.database import Base
import uuid
import enum


def gen_uuid():
    return str(uuid.uuid4())


class RoomType(str, enum.Enum):
    """Ward room categories"""
    ICU = "ICU"
    GENERAL = "General"
    ISOLATION = "Isolation"
    SURGERY = "Surgery"


class Room(Base):
    """Hospital room with a capacity and a per-day rate"""
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    number = Column(String(20), unique=True, nullable=False, index=True)
    room_type = Column(Enum(RoomType), nullable=False, default=RoomType.GENERAL)
    capacity = Column(Integer, nullable=False, default=1)
    occupied = Column(Integer, nullable=False, default=0)
    daily_rate = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    admissions = relationship("Admission", back_populates="room")

    __table_args__ = (
        CheckConstraint('capacity >= 1', name='check_room_capacity'),
        CheckConstraint('occupied >= 0 AND occupied <= capacity', name='check_room_occupancy'),
        CheckConstraint('daily_rate > 0', name='check_room_rate'),
    )

    @property
    def is_available(self) -> bool:
        return self.occupied < self.capacity

    @property
    def free_slots(self) -> int:
        return max(0, self.capacity - self.occupied)
