"""
Rooms API Schemas
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from vetclinic.domain.rooms.models import RoomType


class RoomCreate(BaseModel):
    number: str = Field(..., min_length=1, max_length=20)
    room_type: RoomType
    capacity: int = Field(..., ge=1)
    daily_rate: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class RoomRateUpdate(BaseModel):
    daily_rate: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class RoomResponse(BaseModel):
    id: str
    number: str
    room_type: RoomType
    capacity: int
    occupied: int
    daily_rate: Decimal
    is_available: bool
    free_slots: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
