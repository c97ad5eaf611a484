from typing import Optional, List
from sqlalchemy import select, or_
from sqlalchemy.orm import Session
from vetclinic.domain.patients.models import Pet, Doctor


class PatientDirectoryRepository:
    """Read access to pets, owners and doctors"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, entry):
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def get_pet(self, pet_id: str) -> Optional[Pet]:
        result = self.db.execute(select(Pet).where(Pet.id == pet_id))
        return result.scalar_one_or_none()

    def search_pets(self, term: str, limit: int = 10) -> List[Pet]:
        """Match pet name, owner name, breed or microchip id"""
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        result = self.db.execute(
            select(Pet)
            .where(or_(
                Pet.name.ilike(pattern, escape="\\"),
                Pet.owner_name.ilike(pattern, escape="\\"),
                Pet.breed.ilike(pattern, escape="\\"),
                Pet.microchip_id.ilike(pattern, escape="\\")
            ))
            .order_by(Pet.name)
            .limit(limit)
        )
        return list(result.scalars().all())

    def get_doctor(self, doctor_id: str) -> Optional[Doctor]:
        result = self.db.execute(select(Doctor).where(Doctor.id == doctor_id))
        return result.scalar_one_or_none()

    def list_doctors(self, active_only: bool = True) -> List[Doctor]:
        query = select(Doctor)
        if active_only:
            query = query.where(Doctor.is_active == True)  # noqa: E712
        result = self.db.execute(query.order_by(Doctor.name))
        return list(result.scalars().all())
