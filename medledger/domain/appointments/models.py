"""
Appointments Domain Models

Implements the database models for:
- Appointments, keyed by allocated ID
- The per-patient appointment index
"""

from sqlalchemy import (
    Column, String, Boolean, DateTime, ForeignKey, Integer, UniqueConstraint
)
from sqlalchemy.sql import func
from medledger.infrastructure.database import Base
import enum


class AppointmentStatus(str, enum.Enum):
    """Appointment status, derived from the confirmed flag"""
    SCHEDULED = "SCHEDULED"
    CONFIRMED = "CONFIRMED"


class Appointment(Base):
    """Appointment between a patient and a doctor"""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, autoincrement=False)

    patient_identity = Column(String(255), nullable=False, index=True)
    doctor_identity = Column(String(255), nullable=False, index=True)
    scheduled_time = Column(DateTime, nullable=False)

    # Only field that changes after creation, false to true once
    confirmed = Column(Boolean, nullable=False, default=False)
    confirmed_at = Column(DateTime)

    created_at = Column(DateTime, default=func.now())

    @property
    def status(self) -> AppointmentStatus:
        return AppointmentStatus.CONFIRMED if self.confirmed else AppointmentStatus.SCHEDULED


class PatientAppointmentIndex(Base):
    """Append-only list of appointment IDs per patient"""
    __tablename__ = "patient_appointments"

    patient_identity = Column(String(255), primary_key=True)
    position = Column(Integer, primary_key=True, autoincrement=False)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint('appointment_id', name='unique_patient_appointment'),
    )
