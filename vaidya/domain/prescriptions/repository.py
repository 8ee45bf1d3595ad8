"""
Prescriptions Repository Layer

Provides data access operations for prescriptions and the records they
reference (users, slots, patients).
"""

from typing import Optional, List
from datetime import date
from sqlalchemy import select, exists
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from vaidya.core.exceptions import handle_database_error
from vaidya.domain.prescriptions.models import User, Slot, Patient, Prescription


class EntityRepository:
    """Key-based lookups for a single mapped class"""

    model = None

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, entity_id: int, for_update: bool = False):
        """Get record by ID, optionally locking the row until commit"""
        query = select(self.model).where(self.model.id == entity_id)
        if for_update:
            query = query.with_for_update()
        try:
            return self.db.execute(query).scalars().first()
        except SQLAlchemyError as e:
            raise handle_database_error(e, f"load {self.model.__name__} {entity_id}") from e

    def exists_by_id(self, entity_id: int) -> bool:
        """Check whether a record with the ID exists"""
        try:
            return self.db.execute(
                select(exists().where(self.model.id == entity_id))
            ).scalar()
        except SQLAlchemyError as e:
            raise handle_database_error(e, f"check {self.model.__name__} {entity_id}") from e


class UserRepository(EntityRepository):
    model = User


class SlotRepository(EntityRepository):
    model = Slot


class PatientRepository(EntityRepository):
    model = Patient


class PrescriptionRepository(EntityRepository):
    """Repository for prescription data access operations"""

    model = Prescription

    def _query(self):
        return select(Prescription).options(
            joinedload(Prescription.user),
            joinedload(Prescription.slot),
            joinedload(Prescription.patient)
        )

    def get_by_id(self, prescription_id: int, for_update: bool = False) -> Optional[Prescription]:
        """Get prescription by ID with its relations"""
        query = self._query().where(Prescription.id == prescription_id)
        if for_update:
            # Lock the prescription row only
            query = query.with_for_update(of=Prescription)
        try:
            return self.db.execute(query).scalars().first()
        except SQLAlchemyError as e:
            raise handle_database_error(e, f"load prescription {prescription_id}") from e

    def get_all(self) -> List[Prescription]:
        """Get every prescription in storage order"""
        try:
            return list(self.db.execute(self._query().order_by(Prescription.id)).scalars().all())
        except SQLAlchemyError as e:
            raise handle_database_error(e, "list prescriptions") from e

    def find_by_user_id_and_date(self, user_id: int, on_date: date) -> List[Prescription]:
        """Get a doctor's prescriptions for one calendar day"""
        query = self._query().where(
            Prescription.user_id == user_id,
            Prescription.date == on_date
        ).order_by(Prescription.id)
        try:
            return list(self.db.execute(query).scalars().all())
        except SQLAlchemyError as e:
            raise handle_database_error(e, f"find prescriptions for user {user_id} on {on_date}") from e

    def exists_by_slot_id(self, slot_id: int, exclude_id: Optional[int] = None) -> bool:
        """Check whether a prescription already references the slot"""
        condition = Prescription.slot_id == slot_id
        if exclude_id is not None:
            condition = condition & (Prescription.id != exclude_id)
        try:
            return self.db.execute(select(exists().where(condition))).scalar()
        except SQLAlchemyError as e:
            raise handle_database_error(e, f"check prescriptions for slot {slot_id}") from e

    def save(self, prescription: Prescription) -> Prescription:
        """Insert or update a prescription and commit"""
        try:
            self.db.add(prescription)
            self.db.commit()
            self.db.refresh(prescription)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise handle_database_error(e, "save prescription") from e
        return prescription

    def delete_by_id(self, prescription_id: int) -> bool:
        """Delete a prescription"""
        try:
            prescription = self.db.get(Prescription, prescription_id)
            if prescription is None:
                return False
            self.db.delete(prescription)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise handle_database_error(e, f"delete prescription {prescription_id}") from e
        return True
