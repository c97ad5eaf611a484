"""
Admissions Repository Layer

Provides data access for admissions, their treatments and discharge records.
Writes are flushed, never committed: the admission service owns the
transaction so room occupancy and admission rows change together.
"""

from typing import Optional, List, Protocol
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from vetclinic.domain.admissions.models import (
    Admission, DischargeRecord, Treatment
)


class AdmissionStore(Protocol):
    """Storage contract the admission lifecycle depends on"""

    def add(self, admission: Admission) -> Admission: ...

    def get_by_id(self, admission_id: str) -> Optional[Admission]: ...

    def list(self) -> List[Admission]: ...

    def get_treatment(self, treatment_id: str) -> Optional[Treatment]: ...

    def add_treatment(self, admission: Admission, treatment: Treatment) -> Treatment: ...

    def delete_treatment(self, treatment: Treatment) -> None: ...

    def add_discharge_record(self, admission: Admission, record: DischargeRecord) -> DischargeRecord: ...


class AdmissionRepository:
    """SQLAlchemy implementation of AdmissionStore"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, admission: Admission) -> Admission:
        """Stage a new admission"""
        self.db.add(admission)
        self.db.flush()
        return admission

    def get_by_id(self, admission_id: str) -> Optional[Admission]:
        """Get admission with its treatments and discharge record"""
        result = self.db.execute(
            select(Admission)
            .options(
                selectinload(Admission.treatments),
                selectinload(Admission.discharge_record)
            )
            .where(Admission.id == admission_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    def list(self) -> List[Admission]:
        """List admissions, newest first"""
        query = select(Admission).options(
            selectinload(Admission.treatments),
            selectinload(Admission.discharge_record)
        )

        query = query.order_by(Admission.admission_date.desc(), Admission.admission_time.desc())
        result = self.db.execute(query)
        return list(result.scalars().all())

    def get_treatment(self, treatment_id: str) -> Optional[Treatment]:
        result = self.db.execute(
            select(Treatment)
            .where(Treatment.id == treatment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    def add_treatment(self, admission: Admission, treatment: Treatment) -> Treatment:
        """Append a treatment at the end of the admission's list"""
        next_position = max((t.position for t in admission.treatments), default=0) + 1
        treatment.position = next_position
        admission.treatments.append(treatment)
        self.db.flush()
        return treatment

    def delete_treatment(self, treatment: Treatment) -> None:
        admission = treatment.admission
        admission.treatments.remove(treatment)
        self.db.flush()

    def add_discharge_record(self, admission: Admission, record: DischargeRecord) -> DischargeRecord:
        admission.discharge_record = record
        self.db.flush()
        return record
