import uuid
import logging
from datetime import date, time, datetime

from vaidya.core.exceptions import DuplicatePrescriptionError, PrescriptionNotFoundError, create_error_response
from vaidya.core.log_config import configure_logging
from vaidya.infrastructure.database import SessionLocal, init_db, close_db
from vaidya.domain.prescriptions.models import User, Slot, Patient
from vaidya.domain.prescriptions.schemas import PrescriptionResponse
from vaidya.domain.prescriptions.service import PrescriptionService

logger = logging.getLogger("verify_prescription_workflow")


def run_workflow():
    configure_logging()
    logger.info("Initializing database...")
    init_db()

    db = SessionLocal()

    try:
        print("\n--- 1. Setup Data ---")
        doctor = User(
            email=f"doctor_{uuid.uuid4().hex[:8]}@vaidya.example",
            role="DOCTOR",
            password="hashed_secret"
        )
        db.add(doctor)
        db.flush()

        slot = Slot(
            start_time=time(10, 0),
            end_time=time(10, 30),
            slot_range="10:00-10:30",
            date=date.today(),
            doctor_id=doctor.id
        )
        db.add(slot)
        db.flush()

        patient = Patient(
            patient_name="John Doe",
            mobile_no="9000000000",
            email="john.doe@example.com",
            age=41,
            date_time=datetime.now(),
            user_id=doctor.id,
            slot_id=slot.id
        )
        db.add(patient)
        db.commit()
        print(f"Created Doctor {doctor.id}, Slot {slot.id} ({slot.slot_range}), Patient {patient.id}")

        service = PrescriptionService(db)
        draft = {
            "fever": 101.2,
            "weight": 72.0,
            "bp": "120/80",
            "sugar": 105.0,
            "date": date.today(),
            "tests": ["CBC"],
            "medicines": ["Paracetamol 500mg"],
            "history": ["Headache for 3 days"],
            "user": {"id": doctor.id},
            "slot": {"id": slot.id},
            "patient": {"id": patient.id},
        }

        print("\n--- 2. Write Prescription ---")
        prescription = service.create_prescription(draft)
        print(f"Created Prescription {prescription.id}")

        print("\n--- 3. Second Prescription For Same Slot ---")
        try:
            service.create_prescription(draft)
        except DuplicatePrescriptionError as e:
            print(f"Rejected: {create_error_response(e).model_dump_json()}")

        print("\n--- 4. Update Prescription ---")
        draft["medicines"] = ["Paracetamol 500mg", "Cetirizine 10mg"]
        prescription = service.update_prescription(prescription.id, draft)
        print(f"Medicines now: {prescription.medicines}")

        # Simulate new request / clear cache to ensure relationships are re-loaded
        db.expire_all()

        print("\n--- 5. Doctor's Day ---")
        todays = service.get_prescriptions_by_user_id_and_date(doctor.id, date.today())
        for p in todays:
            print(PrescriptionResponse.model_validate(p).model_dump_json(indent=2))

        print("\n--- 6. Delete Prescription ---")
        service.delete_prescription(prescription.id)
        try:
            service.get_prescription_by_id(prescription.id)
        except PrescriptionNotFoundError as e:
            print(f"Gone: {e.message}")

        print("\nWORKFLOW COMPLETED SUCCESSFULLY")

    except Exception:
        logger.exception("WORKFLOW FAILED")
        raise
    finally:
        db.close()
        close_db()


if __name__ == "__main__":
    run_workflow()
