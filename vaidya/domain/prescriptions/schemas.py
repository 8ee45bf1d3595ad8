from pydantic import BaseModel, field_validator
from typing import Optional, List
import datetime as dt


class EntityRef(BaseModel):
    """Identifier stub for a related record"""
    id: Optional[int] = None


class PrescriptionDraft(BaseModel):
    """Caller-supplied payload for creating or updating a prescription"""
    fever: Optional[float] = None
    weight: Optional[float] = None
    bp: Optional[str] = None
    sugar: Optional[float] = None
    date: Optional[dt.date] = None
    tests: List[str] = []
    medicines: List[str] = []
    history: List[str] = []
    user: Optional[EntityRef] = None
    slot: Optional[EntityRef] = None
    patient: Optional[EntityRef] = None

    @field_validator('tests', 'medicines', 'history', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v


class UserResponse(BaseModel):
    id: int
    email: str
    role: Optional[str] = None

    class Config:
        from_attributes = True


class SlotResponse(BaseModel):
    id: int
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    slot_range: Optional[str] = None
    status: Optional[str] = None
    date: Optional[dt.date] = None
    doctor_id: int

    class Config:
        from_attributes = True


class PatientResponse(BaseModel):
    id: int
    patient_name: Optional[str] = None
    mobile_no: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None
    date_time: Optional[dt.datetime] = None
    address: Optional[str] = None

    class Config:
        from_attributes = True


class PrescriptionResponse(BaseModel):
    """Prescription as returned to callers, relations fully loaded"""
    id: int
    fever: Optional[float] = None
    weight: Optional[float] = None
    bp: Optional[str] = None
    sugar: Optional[float] = None
    date: Optional[dt.date] = None
    tests: List[str] = []
    medicines: List[str] = []
    history: List[str] = []
    user: UserResponse
    slot: SlotResponse
    patient: PatientResponse

    class Config:
        from_attributes = True
