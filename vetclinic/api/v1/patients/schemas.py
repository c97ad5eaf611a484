from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class PetReference(BaseModel):
    """Pet identity copied onto an admission"""
    id: str
    name: str = Field(..., min_length=1, max_length=100)
    species: Optional[str] = None
    breed: Optional[str] = None


class OwnerReference(BaseModel):
    id: str
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = None


class DoctorReference(BaseModel):
    id: str
    name: str = Field(..., min_length=1, max_length=200)


class PetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    species: str
    breed: Optional[str] = None
    microchip_id: Optional[str] = None
    owner_name: str = Field(..., min_length=1, max_length=200)
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None


class PetResponse(BaseModel):
    id: str
    name: str
    species: str
    breed: Optional[str] = None
    microchip_id: Optional[str] = None
    owner_id: str
    owner_name: str
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DoctorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    specialization: Optional[str] = None
    phone: Optional[str] = None


class DoctorResponse(BaseModel):
    id: str
    name: str
    specialization: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
