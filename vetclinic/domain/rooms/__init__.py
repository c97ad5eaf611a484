# Rooms domain module
from vetclinic.domain.rooms.models import Room, RoomType

__all__ = ["Room", "RoomType"]
