"""
Rooms API Routes

Room registry and availability endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from vetclinic.api.deps import get_room_registry
from vetclinic.domain.rooms.models import RoomType
from vetclinic.domain.rooms.service import RoomRegistry
from vetclinic.api.v1.rooms.schemas import RoomCreate, RoomRateUpdate, RoomResponse

router = APIRouter()


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    room_type: Optional[RoomType] = Query(None),
    registry: RoomRegistry = Depends(get_room_registry)
):
    """List every room with its occupancy"""
    return registry.list_rooms(room_type)


@router.get("/available", response_model=List[RoomResponse])
def list_available_rooms(
    room_type: Optional[RoomType] = Query(None),
    registry: RoomRegistry = Depends(get_room_registry)
):
    """Rooms with at least one free slot"""
    return registry.find_available(room_type)


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    room_data: RoomCreate,
    registry: RoomRegistry = Depends(get_room_registry)
):
    return registry.add_room(
        number=room_data.number,
        room_type=room_data.room_type,
        capacity=room_data.capacity,
        daily_rate=room_data.daily_rate
    )


@router.get("/{room_number}", response_model=RoomResponse)
def get_room(room_number: str, registry: RoomRegistry = Depends(get_room_registry)):
    return registry.get_room(room_number)


@router.patch("/{room_number}/rate", response_model=RoomResponse)
def update_room_rate(
    room_number: str,
    update: RoomRateUpdate,
    registry: RoomRegistry = Depends(get_room_registry)
):
    """Change the daily rate used for future admissions"""
    return registry.update_daily_rate(room_number, update.daily_rate)
