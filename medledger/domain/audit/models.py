from sqlalchemy import Column, String, DateTime, JSON, Integer, Enum
from sqlalchemy.sql import func
from medledger.infrastructure.database import Base
import enum


class AuditEvent(str, enum.Enum):
    """Audit notifications, one per successful mutating call"""
    PATIENT_REGISTERED = "PatientRegistered"
    DOCTOR_REGISTERED = "DoctorRegistered"
    LAB_REGISTERED = "LabRegistered"
    APPOINTMENT_SCHEDULED = "AppointmentScheduled"
    APPOINTMENT_CONFIRMED = "AppointmentConfirmed"
    MEDICAL_RECORD_ADDED = "MedicalRecordAdded"
    LAB_RESULTS_UPDATED = "LabResultsUpdated"
    ACCESS_GRANTED = "AccessGranted"  # reserved


class AuditLog(Base):
    """Audit trail entry"""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event = Column(Enum(AuditEvent), nullable=False, index=True)

    # Who did it, and to whom
    actor = Column(String(255), nullable=False, index=True)
    subject = Column(String(255), nullable=True, index=True)

    # Appointment or record ID, when the event concerns one
    entity_id = Column(Integer, nullable=True)
    details = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=func.now(), index=True)
