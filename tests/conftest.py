import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from vetclinic.main import app
from vetclinic.api.deps import get_clock, get_locks
from vetclinic.infrastructure.database import get_db, init_db, Base
from vetclinic.infrastructure.locks import LocalLockManager
from vetclinic.domain.rooms.models import RoomType
from vetclinic.domain.rooms.service import RoomRegistry
from vetclinic.domain.patients.service import PatientDirectory
from vetclinic.domain.admissions.service import AdmissionService
from vetclinic.api.v1.patients.schemas import PetCreate, DoctorCreate


# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Wednesday
ADMITTED_AT = datetime(2024, 1, 24, 9, 30)


class FixedClock:
    """Stand-in for datetime.now that only moves when told to"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="function")
def test_engine():
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    TestSessionLocal = sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(tmp_path):
    """File-backed SQLite sessions for tests that use several threads.

    Each thread gets its own connection, like separate API requests do.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'threads.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(ADMITTED_AT)


@pytest.fixture
def locks() -> LocalLockManager:
    return LocalLockManager(timeout=5.0)


@pytest.fixture
def registry(db_session: Session) -> RoomRegistry:
    return RoomRegistry(db_session)


@pytest.fixture
def directory(db_session: Session) -> PatientDirectory:
    return PatientDirectory(db_session)


@pytest.fixture
def admission_service(db_session: Session, locks: LocalLockManager, clock: FixedClock) -> AdmissionService:
    """Admission service fixture"""
    return AdmissionService(db_session, locks=locks, clock=clock)


@pytest.fixture
def icu_room(registry: RoomRegistry):
    """Single-slot ICU room at 150/day"""
    return registry.add_room("ICU-01", RoomType.ICU, capacity=1, daily_rate=Decimal("150.00"))


@pytest.fixture
def general_room(registry: RoomRegistry):
    return registry.add_room("GEN-01", RoomType.GENERAL, capacity=3, daily_rate=Decimal("60.00"))


@pytest.fixture
def buddy(directory: PatientDirectory):
    return directory.register_pet(PetCreate(
        name="Buddy",
        species="Dog",
        breed="Golden Retriever",
        microchip_id="985112345678901",
        owner_name="John Smith",
        owner_phone="555-0101"
    ))


@pytest.fixture
def luna(directory: PatientDirectory):
    return directory.register_pet(PetCreate(
        name="Luna",
        species="Cat",
        breed="Siamese",
        owner_name="Maria Garcia",
        owner_phone="555-0102"
    ))


@pytest.fixture
def doctor(directory: PatientDirectory):
    return directory.register_doctor(DoctorCreate(name="Dr. Sarah Wilson", specialization="Surgery"))


@pytest.fixture
def admit(admission_service: AdmissionService, directory: PatientDirectory, doctor):
    """Open an admission for a registered pet"""

    def _admit(pet, room_number: str, reason: str = "Post-surgery monitoring", **kwargs):
        pet_ref, owner_ref, doctor_ref = directory.references_for(pet.id, doctor.id)
        return admission_service.open_admission(
            pet_ref, owner_ref, doctor_ref, room_number, reason, **kwargs
        )

    return _admit


@pytest.fixture(scope="function")
def client(db_session: Session, locks: LocalLockManager, clock: FixedClock) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_locks] = lambda: locks
    app.dependency_overrides[get_clock] = lambda: clock

    yield TestClient(app)

    app.dependency_overrides.clear()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "rooms: mark test as room registry related"
    )
    config.addinivalue_line(
        "markers", "admissions: mark test as admission lifecycle related"
    )
    config.addinivalue_line(
        "markers", "treatments: mark test as treatment timeline related"
    )
    config.addinivalue_line(
        "markers", "billing: mark test as discharge billing related"
    )
    config.addinivalue_line(
        "markers", "reports: mark test as filtering and reporting related"
    )
    config.addinivalue_line(
        "markers", "concurrency: mark test as exercising concurrent access"
    )
