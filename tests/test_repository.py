import pytest
from datetime import date
from unittest import mock
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from vaidya.core.exceptions import StoreUnavailableError
from vaidya.domain.prescriptions.models import Prescription, User, Slot, Patient
from vaidya.domain.prescriptions.repository import PrescriptionRepository, SlotRepository


@pytest.fixture
def prescription_repo(db_session: Session) -> PrescriptionRepository:
    """Prescription repository fixture"""
    return PrescriptionRepository(db_session)


@pytest.fixture
def stored_prescription(
    prescription_repo: PrescriptionRepository,
    doctor: User,
    slot: Slot,
    patient: Patient
) -> Prescription:
    prescription = Prescription(
        fever=99.0,
        bp="118/76",
        date=date(2025, 3, 14),
        tests=["X-ray"],
        medicines=[],
        history=[],
        user=doctor,
        slot=slot,
        patient=patient,
    )
    return prescription_repo.save(prescription)


@pytest.mark.unit
def test_save_assigns_id(stored_prescription: Prescription):
    """Test saving a new prescription assigns an identifier"""
    assert stored_prescription.id is not None
    assert stored_prescription.slot_id is not None


@pytest.mark.unit
def test_exists_by_slot_id(prescription_repo: PrescriptionRepository, stored_prescription: Prescription):
    """Test the slot index query"""
    assert prescription_repo.exists_by_slot_id(stored_prescription.slot_id) is True
    assert prescription_repo.exists_by_slot_id(stored_prescription.slot_id, exclude_id=stored_prescription.id) is False
    assert prescription_repo.exists_by_slot_id(999) is False


@pytest.mark.unit
def test_get_by_id_for_update(prescription_repo: PrescriptionRepository, stored_prescription: Prescription):
    """Test the locking lookup has the same signature and result as the base repository"""
    locked = prescription_repo.get_by_id(stored_prescription.id, for_update=True)

    assert locked is stored_prescription
    assert locked.slot is not None
    assert prescription_repo.get_by_id(stored_prescription.id + 1, for_update=True) is None


@pytest.mark.unit
def test_exists_by_id(prescription_repo: PrescriptionRepository, stored_prescription: Prescription):
    """Test existence by primary key"""
    assert prescription_repo.exists_by_id(stored_prescription.id) is True
    assert prescription_repo.exists_by_id(stored_prescription.id + 1) is False


@pytest.mark.unit
def test_find_by_user_id_and_date(
    prescription_repo: PrescriptionRepository,
    stored_prescription: Prescription,
    doctor: User
):
    """Test the per-doctor daily query"""
    found = prescription_repo.find_by_user_id_and_date(doctor.id, date(2025, 3, 14))
    assert [p.id for p in found] == [stored_prescription.id]
    assert prescription_repo.find_by_user_id_and_date(doctor.id, date(2025, 3, 13)) == []


@pytest.mark.unit
def test_delete_by_id(prescription_repo: PrescriptionRepository, stored_prescription: Prescription):
    """Test deletion reports whether a row was removed"""
    assert prescription_repo.delete_by_id(stored_prescription.id) is True
    assert prescription_repo.get_by_id(stored_prescription.id) is None
    assert prescription_repo.delete_by_id(stored_prescription.id) is False


@pytest.mark.unit
def test_ids_not_reused_after_delete(
    prescription_repo: PrescriptionRepository,
    stored_prescription: Prescription,
    doctor: User,
    slot: Slot,
    patient: Patient
):
    """Test a new prescription never takes a deleted one's identifier"""
    old_id = stored_prescription.id
    prescription_repo.delete_by_id(old_id)

    replacement = prescription_repo.save(Prescription(user=doctor, slot=slot, patient=patient))
    assert replacement.id > old_id


@pytest.mark.unit
def test_store_failure_is_wrapped(db_session: Session):
    """Test driver errors surface as StoreUnavailableError"""
    repo = SlotRepository(db_session)
    failure = OperationalError("SELECT 1", {}, Exception("connection refused"))

    with mock.patch.object(db_session, "execute", side_effect=failure):
        with pytest.raises(StoreUnavailableError) as exc_info:
            repo.get_by_id(1)

    assert exc_info.value.message == "Database connection failed"
    assert exc_info.value.status_code == 500
