"""
Admissions Service Layer

Business logic for the admission lifecycle:
- open an admission against a room (reserving capacity)
- log treatments while the stay is Active
- discharge with a calculated bill and optional staff override
- transfer to another room (close and reopen, linked)

Room capacity changes and admission rows are written in one transaction,
under the room lock. Treatment changes on an admission run under that
admission's lock so the running bill stays consistent.
"""

from typing import Callable, List, Optional
from datetime import datetime, date
from decimal import Decimal
import logging

from sqlalchemy.orm import Session

from vetclinic.core.exceptions import (
    AdmissionClosedError, ErrorHandler, NotFoundError, ValidationError
)
from vetclinic.domain.admissions.models import (
    Admission, AdmissionStatus, DischargeRecord, Treatment, TreatmentStatus
)
from vetclinic.domain.admissions.repository import AdmissionRepository, AdmissionStore
from vetclinic.domain.admissions.timeline import (
    TreatmentTimeline, ensure_removable, ensure_treatment_transition
)
from vetclinic.domain.billing.calculator import (
    BillBreakdown, calculate_bill, running_estimate, to_money
)
from vetclinic.domain.reporting.views import (
    AdmissionFilters, AdmissionStats, admission_stats, filter_admissions
)
from vetclinic.domain.rooms.service import RoomRegistry
from vetclinic.infrastructure.locks import (
    LockManager, admission_lock_key, get_lock_manager, room_lock_key
)
from vetclinic.api.v1.patients.schemas import PetReference, OwnerReference, DoctorReference
from vetclinic.api.v1.admissions.schemas import TreatmentCreate, DischargeCreate

logger = logging.getLogger(__name__)


class AdmissionService:
    """Service layer for admissions, treatments and discharge"""

    def __init__(
        self,
        db: Session,
        locks: Optional[LockManager] = None,
        clock: Optional[Callable[[], datetime]] = None,
        admission_store: Optional[AdmissionStore] = None,
        room_registry: Optional[RoomRegistry] = None
    ):
        self.db = db
        self.admission_repo = admission_store or AdmissionRepository(db)
        self.room_registry = room_registry or RoomRegistry(db)
        self.locks = locks or get_lock_manager()
        self.clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _now(self) -> datetime:
        return self.clock().replace(microsecond=0)

    def _require_active(self, admission: Admission) -> None:
        if not admission.is_active:
            raise AdmissionClosedError(admission.id, AdmissionStatus(admission.status).value)

    def _refresh_running_bill(self, admission: Admission) -> None:
        admission.total_bill = running_estimate(admission, self._now()).calculated_bill

    def _treatment_of(self, admission: Admission, treatment_id: str) -> Treatment:
        for treatment in admission.treatments:
            if treatment.id == treatment_id:
                return treatment
        raise NotFoundError(
            f"Treatment {treatment_id} not found",
            details={"treatment_id": treatment_id, "admission_id": admission.id}
        )

    def _owning_admission_id(self, treatment_id: str, admission_id: Optional[str]) -> str:
        treatment = self.admission_repo.get_treatment(treatment_id)
        if treatment is None or (admission_id and treatment.admission_id != admission_id):
            raise NotFoundError(f"Treatment {treatment_id} not found", details={"treatment_id": treatment_id})
        return treatment.admission_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_admission(self, admission_id: str) -> Admission:
        admission = self.admission_repo.get_by_id(admission_id)
        if not admission:
            raise NotFoundError(f"Admission {admission_id} not found", details={"admission_id": admission_id})
        return admission

    def list_admissions(self, filters: Optional[AdmissionFilters] = None) -> List[Admission]:
        """Admissions matching every active filter, newest first"""
        filters = filters or AdmissionFilters()
        return filter_admissions(
            self.admission_repo.list(),
            self.room_registry.list_rooms(),
            filters,
            today=self._now().date()
        )

    def stats(self) -> AdmissionStats:
        return admission_stats(
            self.admission_repo.list(),
            self.room_registry.list_rooms(),
            today=self._now().date()
        )

    def list_treatments(self, admission_id: str) -> TreatmentTimeline:
        return TreatmentTimeline(self.get_admission(admission_id).treatments)

    def preview_bill(self, admission_id: str, discharge_date: Optional[date] = None) -> BillBreakdown:
        """What discharging on `discharge_date` would bill, without side effects.

        Closed stays have a frozen bill, so only Active admissions can be previewed.
        """
        admission = self.get_admission(admission_id)
        self._require_active(admission)
        discharge_date = discharge_date or self._now().date()
        if discharge_date < admission.admission_date:
            raise ValidationError(
                "Discharge date cannot be before admission date",
                details={"admission_date": admission.admission_date.isoformat(),
                         "discharge_date": discharge_date.isoformat()}
            )
        return calculate_bill(admission, discharge_date)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open_admission(
        self,
        pet: PetReference,
        owner: OwnerReference,
        doctor: DoctorReference,
        room_number: str,
        reason: str,
        estimated_discharge: Optional[date] = None,
        notes: Optional[str] = None
    ) -> Admission:
        """Admit a pet to a room that has a free slot"""
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Reason for admission is required", details={"field": "reason"})

        now = self._now()
        if estimated_discharge and estimated_discharge < now.date():
            raise ValidationError(
                "Estimated discharge cannot be before the admission date",
                details={"estimated_discharge": estimated_discharge.isoformat()}
            )

        with self.locks.hold(room_lock_key(room_number)):
            with ErrorHandler("open admission", self.db):
                daily_rate = self.room_registry.reserve(room_number)
                admission = self.admission_repo.add(Admission(
                    pet_id=pet.id,
                    pet_name=pet.name,
                    pet_species=pet.species,
                    pet_breed=pet.breed,
                    owner_id=owner.id,
                    owner_name=owner.name,
                    owner_phone=owner.phone,
                    doctor_id=doctor.id,
                    doctor_name=doctor.name,
                    room_number=room_number,
                    admission_date=now.date(),
                    admission_time=now.time(),
                    reason=reason,
                    status=AdmissionStatus.ACTIVE,
                    estimated_discharge=estimated_discharge,
                    total_bill=Decimal("0.00"),
                    daily_rate=daily_rate,
                    notes=notes or "",
                ))
                self.db.commit()

        logger.info(f"Admitted {pet.name} ({admission.id}) to room {room_number} at {daily_rate}/day")
        return admission

    def add_treatment(self, admission_id: str, treatment_in: TreatmentCreate) -> Treatment:
        """Append a treatment to an Active admission"""
        with self.locks.hold(admission_lock_key(admission_id)):
            admission = self.get_admission(admission_id)
            self._require_active(admission)

            description = (treatment_in.description or "").strip()
            if not description:
                raise ValidationError("Treatment description is required", details={"field": "description"})

            now = self._now()
            with ErrorHandler("add treatment", self.db):
                treatment = self.admission_repo.add_treatment(admission, Treatment(
                    treatment_date=treatment_in.treatment_date or now.date(),
                    treatment_time=treatment_in.treatment_time or now.time(),
                    treatment_type=treatment_in.type,
                    description=description,
                    doctor_name=treatment_in.doctor_name or admission.doctor_name,
                    cost=to_money(treatment_in.cost),
                    status=treatment_in.status,
                ))
                self._refresh_running_bill(admission)
                self.db.commit()

        logger.debug(f"Treatment {treatment.id} added to admission {admission_id}")
        return treatment

    def update_treatment_status(
        self,
        treatment_id: str,
        new_status: TreatmentStatus,
        admission_id: Optional[str] = None
    ) -> Treatment:
        """Complete or cancel a scheduled treatment"""
        admission_id = self._owning_admission_id(treatment_id, admission_id)

        with self.locks.hold(admission_lock_key(admission_id)):
            admission = self.get_admission(admission_id)
            treatment = self._treatment_of(admission, treatment_id)
            self._require_active(admission)
            ensure_treatment_transition(treatment, new_status)

            with ErrorHandler("update treatment status", self.db):
                treatment.status = new_status
                self._refresh_running_bill(admission)
                self.db.commit()

        return treatment

    def remove_treatment(self, treatment_id: str, admission_id: Optional[str] = None) -> None:
        """Delete a treatment that is still Scheduled"""
        admission_id = self._owning_admission_id(treatment_id, admission_id)

        with self.locks.hold(admission_lock_key(admission_id)):
            admission = self.get_admission(admission_id)
            treatment = self._treatment_of(admission, treatment_id)
            self._require_active(admission)
            ensure_removable(treatment)

            with ErrorHandler("remove treatment", self.db):
                self.admission_repo.delete_treatment(treatment)
                self._refresh_running_bill(admission)
                self.db.commit()

        logger.debug(f"Treatment {treatment_id} removed from admission {admission_id}")

    def discharge_admission(self, admission_id: str, discharge_in: DischargeCreate) -> Admission:
        """Close an Active admission, freeze its bill and free the room.

        The calculated bill is always stored on the discharge record; a staff
        supplied `final_bill` only replaces it as the amount owed.
        """
        with self.locks.hold(admission_lock_key(admission_id)):
            admission = self.get_admission(admission_id)
            self._require_active(admission)

            now = self._now()
            discharge_date = discharge_in.discharge_date or now.date()
            discharge_time = discharge_in.discharge_time or now.time()

            if discharge_date < admission.admission_date:
                raise ValidationError(
                    "Discharge date cannot be before admission date",
                    details={"admission_date": admission.admission_date.isoformat(),
                             "discharge_date": discharge_date.isoformat()}
                )
            if discharge_in.follow_up_date and discharge_in.follow_up_date < discharge_date:
                raise ValidationError(
                    "Follow-up date cannot be before the discharge date",
                    details={"follow_up_date": discharge_in.follow_up_date.isoformat()}
                )

            breakdown = calculate_bill(admission, discharge_date)
            if discharge_in.final_bill is not None:
                final_bill = to_money(discharge_in.final_bill)
            else:
                final_bill = breakdown.calculated_bill

            with self.locks.hold(room_lock_key(admission.room_number)):
                with ErrorHandler("discharge admission", self.db):
                    self.admission_repo.add_discharge_record(admission, DischargeRecord(
                        discharge_date=discharge_date,
                        discharge_time=discharge_time,
                        discharge_notes=discharge_in.discharge_notes,
                        follow_up_required=discharge_in.follow_up_required,
                        follow_up_date=discharge_in.follow_up_date,
                        follow_up_instructions=discharge_in.follow_up_instructions,
                        medications_dispensed=discharge_in.medications_dispensed,
                        stay_duration_days=breakdown.stay_duration_days,
                        calculated_bill=breakdown.calculated_bill,
                        final_bill=final_bill,
                        payment_status=discharge_in.payment_status,
                        payment_method=discharge_in.payment_method,
                    ))
                    admission.status = AdmissionStatus.DISCHARGED
                    admission.actual_discharge = discharge_date
                    admission.total_bill = final_bill
                    self.room_registry.release(admission.room_number)
                    self.db.commit()

        if final_bill != breakdown.calculated_bill:
            logger.info(
                f"Admission {admission_id} discharged with override: "
                f"calculated {breakdown.calculated_bill}, final {final_bill}"
            )
        else:
            logger.info(f"Admission {admission_id} discharged, bill {final_bill}")
        return admission

    def transfer_admission(self, admission_id: str, new_room_number: str) -> Admission:
        """Move a stay to another room.

        The current record becomes Transferred with its bill frozen at the
        calculated amount so far, and a new Active admission linked to it is
        opened in the new room at that room's current rate. Returns the new
        admission.
        """
        with self.locks.hold(admission_lock_key(admission_id)):
            admission = self.get_admission(admission_id)
            self._require_active(admission)

            if new_room_number == admission.room_number:
                raise ValidationError(
                    "Admission is already in this room",
                    details={"room_number": new_room_number}
                )

            now = self._now()
            room_keys = [room_lock_key(admission.room_number), room_lock_key(new_room_number)]
            with self.locks.hold_many(room_keys):
                with ErrorHandler("transfer admission", self.db):
                    # Reserve first: a full or unknown target leaves the stay untouched
                    daily_rate = self.room_registry.reserve(new_room_number)

                    closing = calculate_bill(admission, now.date())
                    admission.status = AdmissionStatus.TRANSFERRED
                    admission.actual_discharge = now.date()
                    admission.total_bill = closing.calculated_bill
                    self.room_registry.release(admission.room_number)

                    successor = self.admission_repo.add(Admission(
                        pet_id=admission.pet_id,
                        pet_name=admission.pet_name,
                        pet_species=admission.pet_species,
                        pet_breed=admission.pet_breed,
                        owner_id=admission.owner_id,
                        owner_name=admission.owner_name,
                        owner_phone=admission.owner_phone,
                        doctor_id=admission.doctor_id,
                        doctor_name=admission.doctor_name,
                        room_number=new_room_number,
                        admission_date=now.date(),
                        admission_time=now.time(),
                        reason=admission.reason,
                        status=AdmissionStatus.ACTIVE,
                        estimated_discharge=admission.estimated_discharge,
                        total_bill=Decimal("0.00"),
                        daily_rate=daily_rate,
                        notes=admission.notes,
                        transferred_from_id=admission.id,
                    ))
                    admission.transferred_to_id = successor.id
                    self.db.commit()

        logger.info(
            f"Admission {admission_id} transferred from room {admission.room_number} "
            f"to {new_room_number} as {successor.id}"
        )
        return successor
