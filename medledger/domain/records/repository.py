"""
Medical Records Repository Layer

Provides data access operations for medical records and their patient and
doctor indices.
"""

from typing import Optional, List, Type, Union
from sqlalchemy import func
from sqlalchemy.orm import Session

from medledger.domain.records.models import MedicalRecord, PatientRecordIndex, DoctorRecordIndex

RecordIndex = Union[Type[PatientRecordIndex], Type[DoctorRecordIndex]]


class MedicalRecordRepository:
    """Repository for medical record data access operations"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, record_data: dict) -> MedicalRecord:
        """Create a new medical record"""
        record = MedicalRecord(**record_data)
        self.db.add(record)
        self.db.flush()
        return record

    def get_by_id(self, record_id: int) -> Optional[MedicalRecord]:
        """Get medical record by ID"""
        return self.db.get(MedicalRecord, record_id)

    def update_fields(self, record: MedicalRecord, update_data: dict) -> MedicalRecord:
        for key, value in update_data.items():
            setattr(record, key, value)
        self.db.flush()
        return record

    def _owner_column(self, index: RecordIndex):
        if index is PatientRecordIndex:
            return PatientRecordIndex.patient_identity
        return DoctorRecordIndex.doctor_identity

    def _append(self, index: RecordIndex, owner: str, record_id: int) -> None:
        owner_column = self._owner_column(index)
        last = self.db.query(func.max(index.position)).filter(owner_column == owner).scalar()
        position = 0 if last is None else last + 1
        self.db.add(index(**{owner_column.key: owner, "position": position, "record_id": record_id}))
        self.db.flush()

    def _ids(self, index: RecordIndex, owner: str) -> List[int]:
        rows = self.db.query(index.record_id).filter(
            self._owner_column(index) == owner
        ).order_by(index.position).all()
        return [row.record_id for row in rows]

    def append_to_patient_index(self, patient_identity: str, record_id: int) -> None:
        self._append(PatientRecordIndex, patient_identity, record_id)

    def append_to_doctor_index(self, doctor_identity: str, record_id: int) -> None:
        self._append(DoctorRecordIndex, doctor_identity, record_id)

    def get_patient_record_ids(self, patient_identity: str) -> List[int]:
        """Record IDs of a patient in creation order"""
        return self._ids(PatientRecordIndex, patient_identity)

    def get_doctor_record_ids(self, doctor_identity: str) -> List[int]:
        """Record IDs written by a doctor in creation order"""
        return self._ids(DoctorRecordIndex, doctor_identity)

    def get_patient_records(self, patient_identity: str) -> List[MedicalRecord]:
        """Records of a patient in creation order"""
        return self.db.query(MedicalRecord).join(
            PatientRecordIndex,
            PatientRecordIndex.record_id == MedicalRecord.id
        ).filter(
            PatientRecordIndex.patient_identity == patient_identity
        ).order_by(PatientRecordIndex.position).all()
