"""
Prescriptions Service Layer

Business logic for the prescription lifecycle: creation guarded by
reference resolution and one-prescription-per-slot, update, retrieval,
deletion and per-doctor daily listing.
"""

from typing import Optional, List, Tuple, Union, Any
from datetime import date, datetime
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from vaidya.core.config import settings, UPDATE_POLICIES
from vaidya.core.exceptions import (
    InvalidPrescriptionError, DuplicatePrescriptionError, PrescriptionNotFoundError,
    UnknownUpdatePolicyError
)
from vaidya.domain.prescriptions.models import User, Slot, Patient, Prescription
from vaidya.domain.prescriptions.repository import PrescriptionRepository
from vaidya.domain.prescriptions.resolver import ReferenceResolver, as_identifier
from vaidya.domain.prescriptions.schemas import PrescriptionDraft

logger = logging.getLogger(__name__)

REFERENCE_FIELDS = ("user", "slot", "patient")


class PrescriptionService:
    """Service layer for prescription management"""

    def __init__(self, db: Session, update_policy: Optional[str] = None):
        self.db = db
        self.prescription_repo = PrescriptionRepository(db)
        self.resolver = ReferenceResolver(db)
        self.update_policy = (update_policy or settings.PRESCRIPTION_UPDATE_POLICY).lower()
        if self.update_policy not in UPDATE_POLICIES:
            raise UnknownUpdatePolicyError(self.update_policy)

    @staticmethod
    def _coerce_draft(draft: Union[PrescriptionDraft, dict, None]) -> PrescriptionDraft:
        if draft is None:
            raise InvalidPrescriptionError()
        if isinstance(draft, PrescriptionDraft):
            return draft
        try:
            return PrescriptionDraft.model_validate(draft)
        except PydanticValidationError as e:
            raise InvalidPrescriptionError(
                "Prescription data is invalid.",
                details={"errors": e.errors(include_url=False)}
            ) from e

    @staticmethod
    def _reference_ids(draft: PrescriptionDraft) -> Tuple[Any, Any, Any]:
        for name in REFERENCE_FIELDS:
            ref = getattr(draft, name)
            if ref is None or ref.id is None:
                raise InvalidPrescriptionError(f"Prescription {name} reference is missing.")
        return draft.user.id, draft.slot.id, draft.patient.id

    def _resolve_references(
        self,
        draft: PrescriptionDraft,
        lock_slot: bool = False
    ) -> Tuple[User, Slot, Patient]:
        """Resolve user, slot and patient in that order; the first miss wins"""
        user_id, slot_id, patient_id = self._reference_ids(draft)
        user = self.resolver.resolve_user(user_id)
        slot = self.resolver.resolve_slot(slot_id, for_update=lock_slot)
        patient = self.resolver.resolve_patient(patient_id)
        return user, slot, patient

    @staticmethod
    def _apply_clinical_fields(prescription: Prescription, draft: PrescriptionDraft) -> None:
        prescription.fever = draft.fever
        prescription.weight = draft.weight
        prescription.bp = draft.bp
        prescription.sugar = draft.sugar
        prescription.tests = list(draft.tests)
        prescription.medicines = list(draft.medicines)
        prescription.history = list(draft.history)

    def create_prescription(self, draft: Union[PrescriptionDraft, dict, None]) -> Prescription:
        """Create a prescription for a slot that has none yet"""
        draft = self._coerce_draft(draft)

        # The slot row stays locked until save() commits, so concurrent
        # creations for the same slot run the existence check one at a time.
        try:
            user, slot, patient = self._resolve_references(draft, lock_slot=True)
            if self.prescription_repo.exists_by_slot_id(slot.id):
                raise DuplicatePrescriptionError(slot.id)
        except Exception:
            self.db.rollback()
            raise

        prescription = Prescription(date=draft.date, user=user, slot=slot, patient=patient)
        self._apply_clinical_fields(prescription, draft)

        prescription = self.prescription_repo.save(prescription)
        logger.info(f"Created prescription {prescription.id} for slot {slot.id}")
        return prescription

    def update_prescription(
        self,
        prescription_id: Any,
        draft: Union[PrescriptionDraft, dict, None]
    ) -> Prescription:
        """Replace a prescription's clinical fields and re-point its references"""
        prescription = self.get_prescription_by_id(prescription_id)
        draft = self._coerce_draft(draft)
        strict = self.update_policy == "strict"

        try:
            user, slot, patient = self._resolve_references(draft, lock_slot=strict)
            if strict and self.prescription_repo.exists_by_slot_id(slot.id, exclude_id=prescription.id):
                raise DuplicatePrescriptionError(slot.id)
        except Exception:
            self.db.rollback()
            raise

        self._apply_clinical_fields(prescription, draft)
        prescription.user = user
        prescription.slot = slot
        prescription.patient = patient

        prescription = self.prescription_repo.save(prescription)
        logger.info(f"Updated prescription {prescription.id}")
        return prescription

    def get_prescription_by_id(self, prescription_id: Any) -> Prescription:
        """Get prescription by ID"""
        identifier = as_identifier(prescription_id)
        prescription = None
        if identifier is not None:
            prescription = self.prescription_repo.get_by_id(identifier)
        if prescription is None:
            raise PrescriptionNotFoundError(prescription_id)
        return prescription

    def get_all_prescriptions(self) -> List[Prescription]:
        """Get all prescriptions"""
        return self.prescription_repo.get_all()

    def get_prescriptions_by_user_id_and_date(
        self,
        user_id: Any,
        on_date: Union[date, datetime]
    ) -> List[Prescription]:
        """Get a doctor's prescriptions for a calendar day"""
        identifier = as_identifier(user_id)
        if identifier is None:
            return []
        if isinstance(on_date, datetime):
            on_date = on_date.date()
        return self.prescription_repo.find_by_user_id_and_date(identifier, on_date)

    def delete_prescription(self, prescription_id: Any) -> None:
        """Delete prescription"""
        identifier = as_identifier(prescription_id)
        if identifier is None or not self.prescription_repo.exists_by_id(identifier):
            raise PrescriptionNotFoundError(prescription_id)
        self.prescription_repo.delete_by_id(identifier)
        logger.info(f"Deleted prescription {identifier}")
