# Medical records domain module
from medledger.domain.records.models import (
    MedicalRecord,
    PatientRecordIndex,
    DoctorRecordIndex,
)

__all__ = [
    "MedicalRecord",
    "PatientRecordIndex",
    "DoctorRecordIndex",
]
