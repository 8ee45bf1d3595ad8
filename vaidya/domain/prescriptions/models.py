"""
Prescriptions Domain Models

Implements the database models for:
- Users (doctors and account holders)
- Appointment slots
- Patients
- Prescriptions issued during a slot
"""

from sqlalchemy import (
    Column, String, Date, DateTime, ForeignKey, BigInteger,
    Integer, Float, Time, JSON, Index
)
from sqlalchemy.orm import relationship
from vaidya.infrastructure.database import Base

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer, "sqlite")


class User(Base):
    """Doctor or account holder; read-only from the prescription engine"""
    __tablename__ = "users"

    id = Column(IdType, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(50))
    password = Column(String(255))

    def __repr__(self):
        return f"<User id={self.id} email={self.email!r}>"


class Slot(Base):
    """Bookable appointment window owned by a doctor"""
    __tablename__ = "slots"

    id = Column(IdType, primary_key=True, autoincrement=True)
    start_time = Column(Time)
    end_time = Column(Time)
    slot_range = Column(String(50))
    # Availability marker; prescriptions never flip it
    status = Column(String(10), default="yes")
    date = Column(Date)
    doctor_id = Column(IdType, ForeignKey("users.id"), nullable=False)

    doctor = relationship("User")

    def __repr__(self):
        return f"<Slot id={self.id} date={self.date} range={self.slot_range!r}>"


class Patient(Base):
    """Person examined during a slot"""
    __tablename__ = "patients"

    id = Column(IdType, primary_key=True, autoincrement=True)
    patient_name = Column(String(200))
    mobile_no = Column(String(20))
    email = Column(String(255))
    aadhar_no = Column(BigInteger)
    age = Column(Integer)
    date_time = Column(DateTime)
    address = Column(String(500))
    role_id = Column(Integer)
    user_id = Column(IdType, ForeignKey("users.id"))
    slot_id = Column(IdType, ForeignKey("slots.id"))

    user = relationship("User")
    slot = relationship("Slot")

    def __repr__(self):
        return f"<Patient id={self.id} name={self.patient_name!r}>"


class Prescription(Base):
    """Prescription written for a patient during a doctor's slot"""
    __tablename__ = "prescriptions"

    id = Column(IdType, primary_key=True, autoincrement=True)

    # Vitals
    fever = Column(Float)
    weight = Column(Float)
    bp = Column(String(255))
    sugar = Column(Float)
    date = Column(Date)

    # Ordered free-text lists
    tests = Column(JSON, default=list)
    medicines = Column(JSON, default=list)
    history = Column(JSON, default=list)

    # References
    user_id = Column(IdType, ForeignKey("users.id"), nullable=False)
    slot_id = Column(IdType, ForeignKey("slots.id"), nullable=False)
    patient_id = Column(IdType, ForeignKey("patients.id"), nullable=False)

    # Relationships
    user = relationship("User")
    slot = relationship("Slot")
    patient = relationship("Patient")

    __table_args__ = (
        Index("ix_prescriptions_user_id_date", "user_id", "date"),
        Index("ix_prescriptions_slot_id", "slot_id"),
        # Never hand a deleted prescription's id to a new one
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Prescription id={self.id} slot_id={self.slot_id} patient_id={self.patient_id}>"
