# Importing the models registers every table on Base.metadata
from medledger.domain.identity.models import IdentityRole, Role
from medledger.domain.patients.models import PatientProfile
from medledger.domain.sequences.models import IdSequence
from medledger.domain.appointments.models import Appointment, AppointmentStatus, PatientAppointmentIndex
from medledger.domain.records.models import MedicalRecord, PatientRecordIndex, DoctorRecordIndex
from medledger.domain.audit.models import AuditLog, AuditEvent

__all__ = [
    "IdentityRole",
    "Role",
    "PatientProfile",
    "IdSequence",
    "Appointment",
    "AppointmentStatus",
    "PatientAppointmentIndex",
    "MedicalRecord",
    "PatientRecordIndex",
    "DoctorRecordIndex",
    "AuditLog",
    "AuditEvent",
]
