import uuid
from decimal import Decimal
import os
import sys

# Add project root to python path
sys.path.append(os.getcwd())

from vetclinic.infrastructure.database import SessionLocal, init_db
from vetclinic.core.exceptions import RoomFullError, AdmissionClosedError
from vetclinic.domain.rooms.models import RoomType
from vetclinic.domain.rooms.service import RoomRegistry
from vetclinic.domain.patients.service import PatientDirectory
from vetclinic.domain.admissions.service import AdmissionService
from vetclinic.domain.admissions.models import TreatmentType, TreatmentStatus
from vetclinic.api.v1.patients.schemas import PetCreate, DoctorCreate
from vetclinic.api.v1.admissions.schemas import TreatmentCreate, DischargeCreate


def run_workflow():
    print("Initializing database...")
    init_db()

    db = SessionLocal()

    try:
        print("\n--- 1. Setup Data ---")
        suffix = uuid.uuid4().hex[:4].upper()
        registry = RoomRegistry(db)
        icu = registry.add_room(f"ICU-{suffix}", RoomType.ICU, capacity=1, daily_rate=Decimal("150.00"))
        general = registry.add_room(f"GEN-{suffix}", RoomType.GENERAL, capacity=4, daily_rate=Decimal("60.00"))
        print(f"Created rooms {icu.number} and {general.number}")

        directory = PatientDirectory(db)
        buddy = directory.register_pet(PetCreate(
            name="Buddy", species="Dog", breed="Golden Retriever",
            owner_name="John Smith", owner_phone="555-0101"
        ))
        luna = directory.register_pet(PetCreate(
            name="Luna", species="Cat", breed="Siamese",
            owner_name="Maria Garcia", owner_phone="555-0102"
        ))
        doctor = directory.register_doctor(DoctorCreate(name="Dr. Sarah Wilson", specialization="Surgery"))
        print(f"Registered {buddy.name}, {luna.name} and {doctor.name}")

        print("\n--- 2. Admit ---")
        service = AdmissionService(db)
        pet, owner, vet = directory.references_for(buddy.id, doctor.id)
        admission = service.open_admission(pet, owner, vet, icu.number, reason="Post-surgery monitoring")
        print(f"Admitted {admission.pet_name} to {admission.room_number} at {admission.daily_rate}/day")

        print("\n--- 3. Room Capacity ---")
        pet, owner, vet = directory.references_for(luna.id, doctor.id)
        try:
            service.open_admission(pet, owner, vet, icu.number, reason="Observation")
            print("Second admission to a full room was accepted!")
        except RoomFullError as e:
            print(f"Rejected as expected: {e.message}")

        print("\n--- 4. Treatments ---")
        pain = service.add_treatment(admission.id, TreatmentCreate(
            type=TreatmentType.MEDICATION, description="Pain medication", cost=Decimal("25.00"),
            status=TreatmentStatus.COMPLETED
        ))
        xray = service.add_treatment(admission.id, TreatmentCreate(
            type=TreatmentType.PROCEDURE, description="X-ray", cost=Decimal("40.00")
        ))
        service.update_treatment_status(xray.id, TreatmentStatus.CANCELLED)
        timeline = service.list_treatments(admission.id)
        print(f"{len(timeline)} treatments, billable total {timeline.total_cost()} ({pain.description} kept)")

        print("\n--- 5. Transfer ---")
        admission = service.transfer_admission(admission.id, general.number)
        print(f"Transferred to {admission.room_number}, new admission {admission.id}")

        print("\n--- 6. Discharge ---")
        preview = service.preview_bill(admission.id)
        print(f"Bill preview: {preview.stay_duration_days} day(s), {preview.calculated_bill}")
        admission = service.discharge_admission(admission.id, DischargeCreate(
            discharge_notes="Recovered well", follow_up_required=False
        ))
        print(f"Discharged. Final bill {admission.total_bill}, status {admission.status.value}")

        try:
            service.add_treatment(admission.id, TreatmentCreate(description="Late entry", cost=Decimal("5")))
        except AdmissionClosedError as e:
            print(f"Closed admission rejected treatment: {e.error_code}")

        stats = service.stats()
        print(f"Active: {stats.total_active}, occupied rooms: {stats.occupied_rooms}/{stats.total_rooms}")

        print("\n✅ WORKFLOW COMPLETED SUCCESSFULLY!")

    except Exception as e:
        print(f"\n❌ WORKFLOW FAILED: {str(e)}")
        import traceback
        traceback.print_exc()
    finally:
        db.close()


if __name__ == "__main__":
    run_workflow()
