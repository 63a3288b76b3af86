# Appointments domain module
from medledger.domain.appointments.models import (
    Appointment,
    AppointmentStatus,
    PatientAppointmentIndex,
)

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "PatientAppointmentIndex",
]
