from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.sql import func
from vetclinic.infrastructure.database import Base
from vetclinic.domain.rooms.models import gen_uuid


class Pet(Base):
    """Directory entry for a pet and its owner's contact details"""
    __tablename__ = "pets"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    name = Column(String(100), nullable=False, index=True)
    species = Column(String(50), nullable=False)
    breed = Column(String(100))
    microchip_id = Column(String(50), unique=True)

    owner_id = Column(String(36), nullable=False, default=gen_uuid)
    owner_name = Column(String(200), nullable=False, index=True)
    owner_phone = Column(String(30))
    owner_email = Column(String(255))

    created_at = Column(DateTime, default=func.now())


class Doctor(Base):
    """Attending veterinarian"""
    __tablename__ = "doctors"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    name = Column(String(200), nullable=False)
    specialization = Column(String(100))
    phone = Column(String(30))
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=func.now())
