"""
Reference resolution for prescription relations.

Turns a user, slot or patient identifier into the loaded record, or raises
the not-found error for that kind. Read-only.
"""

import enum
from numbers import Integral
from typing import Any

from sqlalchemy.orm import Session

from vaidya.core.exceptions import (
    UserNotFoundError, SlotNotFoundError, PatientNotFoundError
)
from vaidya.domain.prescriptions.models import User, Slot, Patient
from vaidya.domain.prescriptions.repository import (
    UserRepository, SlotRepository, PatientRepository
)


class EntityKind(str, enum.Enum):
    """Kinds of record a prescription references"""
    USER = "User"
    SLOT = "Slot"
    PATIENT = "Patient"


# Largest key a BIGINT column can hold
MAX_IDENTIFIER = 2 ** 63 - 1

NOT_FOUND_ERRORS = {
    EntityKind.USER: UserNotFoundError,
    EntityKind.SLOT: SlotNotFoundError,
    EntityKind.PATIENT: PatientNotFoundError,
}


def as_identifier(value: Any):
    """Coerce an integer-like value to int, or None if it cannot name a record"""
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        value = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    else:
        return None
    return value if 0 < value <= MAX_IDENTIFIER else None


class ReferenceResolver:
    """Loads referenced records by kind and identifier"""

    def __init__(self, db: Session):
        self.db = db
        self.repos = {
            EntityKind.USER: UserRepository(db),
            EntityKind.SLOT: SlotRepository(db),
            EntityKind.PATIENT: PatientRepository(db),
        }

    def resolve(self, kind: EntityKind, entity_id: Any, for_update: bool = False):
        """Return the record of ``kind`` with ``entity_id`` or raise its not-found error"""
        kind = EntityKind(kind)
        identifier = as_identifier(entity_id)
        entity = None
        if identifier is not None:
            entity = self.repos[kind].get_by_id(identifier, for_update=for_update)
        if entity is None:
            raise NOT_FOUND_ERRORS[kind](entity_id)
        return entity

    def resolve_user(self, user_id: Any) -> User:
        return self.resolve(EntityKind.USER, user_id)

    def resolve_slot(self, slot_id: Any, for_update: bool = False) -> Slot:
        return self.resolve(EntityKind.SLOT, slot_id, for_update=for_update)

    def resolve_patient(self, patient_id: Any) -> Patient:
        return self.resolve(EntityKind.PATIENT, patient_id)
