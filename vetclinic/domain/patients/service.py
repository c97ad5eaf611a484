from typing import List, Tuple
from sqlalchemy.orm import Session

from vetclinic.core.exceptions import NotFoundError
from vetclinic.domain.patients.models import Pet, Doctor
from vetclinic.domain.patients.repository import PatientDirectoryRepository
from vetclinic.api.v1.patients.schemas import (
    PetCreate, DoctorCreate, PetReference, OwnerReference, DoctorReference
)

MIN_SEARCH_LENGTH = 2


class PatientDirectory:
    """Lookup of pets/owners and doctors used to fill in admissions"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PatientDirectoryRepository(db)

    def search(self, term: str, limit: int = 10) -> List[Pet]:
        term = (term or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            return []
        return self.repo.search_pets(term, limit=limit)

    def get_pet(self, pet_id: str) -> Pet:
        pet = self.repo.get_pet(pet_id)
        if not pet:
            raise NotFoundError(f"Pet {pet_id} not found", details={"pet_id": pet_id})
        return pet

    def get_doctor(self, doctor_id: str) -> Doctor:
        doctor = self.repo.get_doctor(doctor_id)
        if not doctor:
            raise NotFoundError(f"Doctor {doctor_id} not found", details={"doctor_id": doctor_id})
        return doctor

    def list_doctors(self) -> List[Doctor]:
        return self.repo.list_doctors()

    def register_pet(self, pet_in: PetCreate) -> Pet:
        return self.repo.add(Pet(**pet_in.model_dump()))

    def register_doctor(self, doctor_in: DoctorCreate) -> Doctor:
        return self.repo.add(Doctor(**doctor_in.model_dump()))

    def references_for(
        self, pet_id: str, doctor_id: str
    ) -> Tuple[PetReference, OwnerReference, DoctorReference]:
        """Build the references an admission is opened with"""
        pet = self.get_pet(pet_id)
        doctor = self.get_doctor(doctor_id)
        return (
            PetReference(id=pet.id, name=pet.name, species=pet.species, breed=pet.breed),
            OwnerReference(id=pet.owner_id, name=pet.owner_name, phone=pet.owner_phone),
            DoctorReference(id=doctor.id, name=doctor.name),
        )
