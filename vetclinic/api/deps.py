from datetime import datetime
from typing import Callable

from fastapi import Depends
from sqlalchemy.orm import Session

from vetclinic.infrastructure.database import get_db
from vetclinic.infrastructure.locks import LockManager, get_lock_manager
from vetclinic.domain.admissions.service import AdmissionService
from vetclinic.domain.rooms.service import RoomRegistry
from vetclinic.domain.patients.service import PatientDirectory


def get_clock() -> Callable[[], datetime]:
    """Source of "now" for admissions; overridden in tests"""
    return datetime.now


def get_locks() -> LockManager:
    return get_lock_manager()


def get_admission_service(
    db: Session = Depends(get_db),
    locks: LockManager = Depends(get_locks),
    clock: Callable[[], datetime] = Depends(get_clock)
) -> AdmissionService:
    return AdmissionService(db, locks=locks, clock=clock)


def get_room_registry(db: Session = Depends(get_db)) -> RoomRegistry:
    return RoomRegistry(db)


def get_patient_directory(db: Session = Depends(get_db)) -> PatientDirectory:
    return PatientDirectory(db)
