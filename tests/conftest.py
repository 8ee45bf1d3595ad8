import pytest
from datetime import date, time, datetime
from typing import Generator
from sqlalchemy.orm import Session, sessionmaker

from vaidya.infrastructure.database import Base, build_engine
from vaidya.domain.prescriptions.models import User, Slot, Patient


# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test engine
test_engine = build_engine(TEST_DATABASE_URL)

# Create test session
TestSessionLocal = sessionmaker(
    bind=test_engine, autocommit=False, autoflush=False, expire_on_commit=False
)

CONSULTATION_DAY = date(2025, 3, 14)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def doctor(db_session: Session) -> User:
    """Create the doctor issuing prescriptions."""
    user = User(email="dr.rao@example.com", role="DOCTOR", password="opaque-hash")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def other_doctor(db_session: Session) -> User:
    """Create a second doctor."""
    user = User(email="dr.mehta@example.com", role="DOCTOR", password="opaque-hash")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _make_slot(db_session: Session, doctor: User, start: time, end: time) -> Slot:
    slot = Slot(
        start_time=start,
        end_time=end,
        slot_range=f"{start:%H:%M}-{end:%H:%M}",
        date=CONSULTATION_DAY,
        doctor_id=doctor.id,
    )
    db_session.add(slot)
    db_session.commit()
    db_session.refresh(slot)
    return slot


@pytest.fixture(scope="function")
def slot(db_session: Session, doctor: User) -> Slot:
    """Create a morning slot for the doctor."""
    return _make_slot(db_session, doctor, time(9, 0), time(9, 30))


@pytest.fixture(scope="function")
def second_slot(db_session: Session, doctor: User) -> Slot:
    """Create a later slot for the same doctor."""
    return _make_slot(db_session, doctor, time(9, 30), time(10, 0))


@pytest.fixture(scope="function")
def patient(db_session: Session, doctor: User, slot: Slot) -> Patient:
    """Create the patient examined in the slot."""
    patient = Patient(
        patient_name="Asha Kulkarni",
        mobile_no="9876543210",
        email="asha@example.com",
        aadhar_no=123412341234,
        age=34,
        date_time=datetime(2025, 3, 14, 9, 0),
        address="12 MG Road, Pune",
        role_id=3,
        user_id=doctor.id,
        slot_id=slot.id,
    )
    db_session.add(patient)
    db_session.commit()
    db_session.refresh(patient)
    return patient


@pytest.fixture(scope="function")
def sample_prescription_data(doctor: User, slot: Slot, patient: Patient) -> dict:
    """Sample prescription draft referencing the seeded records."""
    return {
        "fever": 100.4,
        "weight": 61.5,
        "bp": "120/80",
        "sugar": 98.0,
        "date": CONSULTATION_DAY.isoformat(),
        "tests": ["CBC", "Lipid profile", "CBC"],
        "medicines": ["Paracetamol 500mg", "ORS"],
        "history": ["Fever for 3 days", "No known allergies"],
        "user": {"id": doctor.id},
        "slot": {"id": slot.id},
        "patient": {"id": patient.id},
    }


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
        "markers", "prescriptions: mark test as prescription lifecycle related"
    )
