"""
Appointments Repository Layer

Provides data access operations for appointments and the patient index.
"""

from typing import Optional, List
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session

from medledger.domain.appointments.models import Appointment, PatientAppointmentIndex


class AppointmentRepository:
    """Repository for appointment data access operations"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, appointment_data: dict) -> Appointment:
        """Create a new appointment"""
        appointment = Appointment(**appointment_data)
        self.db.add(appointment)
        self.db.flush()
        return appointment

    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        """Get appointment by ID"""
        return self.db.get(Appointment, appointment_id)

    def mark_confirmed(self, appointment: Appointment, confirmed_at: datetime) -> Appointment:
        appointment.confirmed = True
        appointment.confirmed_at = confirmed_at
        self.db.flush()
        return appointment

    def append_to_patient_index(self, patient_identity: str, appointment_id: int) -> None:
        """Append an appointment ID to the end of a patient's index"""
        last = self.db.query(func.max(PatientAppointmentIndex.position)).filter(
            PatientAppointmentIndex.patient_identity == patient_identity
        ).scalar()
        position = 0 if last is None else last + 1
        self.db.add(PatientAppointmentIndex(
            patient_identity=patient_identity,
            position=position,
            appointment_id=appointment_id
        ))
        self.db.flush()

    def get_patient_appointment_ids(self, patient_identity: str) -> List[int]:
        """Appointment IDs of a patient in creation order"""
        rows = self.db.query(PatientAppointmentIndex.appointment_id).filter(
            PatientAppointmentIndex.patient_identity == patient_identity
        ).order_by(PatientAppointmentIndex.position).all()
        return [row.appointment_id for row in rows]
