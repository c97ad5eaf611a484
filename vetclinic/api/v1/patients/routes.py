"""
Patients API Routes

Read-mostly directory of pets, owners and doctors used when admitting.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List

from vetclinic.api.deps import get_patient_directory
from vetclinic.domain.patients.service import PatientDirectory
from vetclinic.api.v1.patients.schemas import (
    PetCreate, PetResponse, DoctorCreate, DoctorResponse
)

router = APIRouter()


@router.get("/search", response_model=List[PetResponse])
def search_pets(
    q: str = Query("", max_length=100),
    limit: int = Query(10, ge=1, le=50),
    directory: PatientDirectory = Depends(get_patient_directory)
):
    """Match pets by name, owner, breed or microchip; needs at least 2 characters"""
    return directory.search(q, limit=limit)


@router.post("", response_model=PetResponse, status_code=status.HTTP_201_CREATED)
def register_pet(pet_data: PetCreate, directory: PatientDirectory = Depends(get_patient_directory)):
    return directory.register_pet(pet_data)


@router.get("/doctors", response_model=List[DoctorResponse])
def list_doctors(directory: PatientDirectory = Depends(get_patient_directory)):
    return directory.list_doctors()


@router.post("/doctors", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
def register_doctor(doctor_data: DoctorCreate, directory: PatientDirectory = Depends(get_patient_directory)):
    return directory.register_doctor(doctor_data)


@router.get("/{pet_id}", response_model=PetResponse)
def get_pet(pet_id: str, directory: PatientDirectory = Depends(get_patient_directory)):
    return directory.get_pet(pet_id)
