# Prescriptions domain module
from vaidya.domain.prescriptions.models import (
    User,
    Slot,
    Patient,
    Prescription,
)
from vaidya.domain.prescriptions.resolver import EntityKind, ReferenceResolver
from vaidya.domain.prescriptions.service import PrescriptionService

__all__ = [
    "User",
    "Slot",
    "Patient",
    "Prescription",
    "EntityKind",
    "ReferenceResolver",
    "PrescriptionService",
]
