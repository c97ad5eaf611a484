import threading
import pytest
from datetime import datetime
from decimal import Decimal

from vetclinic.core.exceptions import RoomFullError
from vetclinic.domain.rooms.models import RoomType
from vetclinic.domain.rooms.service import RoomRegistry
from vetclinic.domain.patients.service import PatientDirectory
from vetclinic.domain.admissions.service import AdmissionService
from vetclinic.infrastructure.locks import LocalLockManager
from vetclinic.api.v1.patients.schemas import PetCreate, DoctorCreate
from vetclinic.api.v1.admissions.schemas import DischargeCreate

WORKERS = 8


def _now():
    return datetime(2024, 1, 24, 9, 30)


@pytest.fixture
def seeded(session_factory):
    """Single-slot room, one doctor and one pet per worker"""
    session = session_factory()
    try:
        RoomRegistry(session).add_room("ICU-01", RoomType.ICU, capacity=1, daily_rate=Decimal("150"))
        directory = PatientDirectory(session)
        doctor = directory.register_doctor(DoctorCreate(name="Dr. Sarah Wilson"))
        pets = [
            directory.register_pet(PetCreate(name=f"Pet {i}", species="Dog", owner_name=f"Owner {i}"))
            for i in range(WORKERS)
        ]
        return doctor.id, [pet.id for pet in pets]
    finally:
        session.close()


def _occupied(session_factory) -> int:
    session = session_factory()
    try:
        return RoomRegistry(session).get_room("ICU-01").occupied
    finally:
        session.close()


@pytest.mark.integration
@pytest.mark.concurrency
class TestRoomCapacityUnderContention:

    def test_only_one_admission_wins_the_last_slot(self, session_factory, seeded):
        doctor_id, pet_ids = seeded
        locks = LocalLockManager(timeout=30)
        barrier = threading.Barrier(WORKERS)
        outcomes = []
        outcomes_guard = threading.Lock()

        def worker(pet_id):
            session = session_factory()
            try:
                service = AdmissionService(session, locks=locks, clock=_now)
                pet, owner, doctor = PatientDirectory(session).references_for(pet_id, doctor_id)
                barrier.wait()
                try:
                    service.open_admission(pet, owner, doctor, "ICU-01", "Observation")
                    result = "admitted"
                except RoomFullError:
                    result = "full"
                with outcomes_guard:
                    outcomes.append(result)
            finally:
                session.close()

        threads = [threading.Thread(target=worker, args=(pet_id,)) for pet_id in pet_ids]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ["admitted"] + ["full"] * (WORKERS - 1)
        assert _occupied(session_factory) == 1

    def test_admit_and_discharge_cycles_keep_count_in_bounds(self, session_factory, seeded):
        doctor_id, pet_ids = seeded
        locks = LocalLockManager(timeout=30)
        observed = []
        observed_guard = threading.Lock()

        def worker(pet_id):
            session = session_factory()
            try:
                service = AdmissionService(session, locks=locks, clock=_now)
                pet, owner, doctor = PatientDirectory(session).references_for(pet_id, doctor_id)
                for _ in range(3):
                    try:
                        admission = service.open_admission(pet, owner, doctor, "ICU-01", "Observation")
                    except RoomFullError:
                        continue
                    occupied = RoomRegistry(session).get_room("ICU-01").occupied
                    with observed_guard:
                        observed.append(occupied)
                    service.discharge_admission(admission.id, DischargeCreate())
            finally:
                session.close()

        threads = [threading.Thread(target=worker, args=(pet_id,)) for pet_id in pet_ids]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert observed
        assert all(count <= 1 for count in observed)
        assert _occupied(session_factory) == 0
