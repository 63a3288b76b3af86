"""
Medical Records Domain Models

Records are immutable once written, except for the lab results reference.
Two append-only indices map patients and doctors to their record IDs.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from medledger.infrastructure.database import Base


class MedicalRecord(Base):
    """Medical record written by a doctor for a registered patient"""
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, autoincrement=False)

    patient_identity = Column(String(255), nullable=False, index=True)
    doctor_identity = Column(String(255), nullable=False, index=True)

    diagnosis = Column(Text, nullable=False)
    prescription = Column(Text, nullable=False, default="")

    # Opaque locator (e.g. content hash), never interpreted
    lab_results_reference = Column(Text, nullable=False, default="")

    created_at = Column(DateTime, nullable=False)


class PatientRecordIndex(Base):
    """Append-only list of record IDs per patient"""
    __tablename__ = "patient_records"

    patient_identity = Column(String(255), primary_key=True)
    position = Column(Integer, primary_key=True, autoincrement=False)
    record_id = Column(Integer, ForeignKey("medical_records.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint('record_id', name='unique_patient_record'),
    )


class DoctorRecordIndex(Base):
    """Append-only list of record IDs per authoring doctor"""
    __tablename__ = "doctor_records"

    doctor_identity = Column(String(255), primary_key=True)
    position = Column(Integer, primary_key=True, autoincrement=False)
    record_id = Column(Integer, ForeignKey("medical_records.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint('record_id', name='unique_doctor_record'),
    )
