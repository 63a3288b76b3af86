"""
Medical Records Service Layer

Doctors write records for registered patients; labs attach result
references. Any registered lab may update any existing record: there is no
binding between a lab and the doctor or appointment that requested it.
"""

from typing import Optional, List
import logging
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from medledger.core.clock import Clock, utcnow
from medledger.core.events import AuditLogger
from medledger.core.exceptions import PatientNotRegistered, RecordNotFound, ValidationError
from medledger.core.permissions import require_role, require_doctor_or_self_patient
from medledger.domain.audit.models import AuditEvent
from medledger.domain.identity.models import Role
from medledger.domain.identity.service import IdentityService, validate_identity
from medledger.domain.patients.service import PatientService
from medledger.domain.records.models import MedicalRecord
from medledger.domain.records.repository import MedicalRecordRepository
from medledger.domain.sequences.service import SequenceService
from medledger.schemas.medical_record import MedicalRecordCreate, LabResultsUpdate

logger = logging.getLogger(__name__)


class MedicalRecordService:
    """Service layer for medical record management"""

    def __init__(
        self,
        db: Session,
        identity_service: Optional[IdentityService] = None,
        patient_service: Optional[PatientService] = None,
        sequence_service: Optional[SequenceService] = None,
        clock: Clock = utcnow
    ):
        self.db = db
        self.identity_service = identity_service or IdentityService(db)
        self.patient_service = patient_service or PatientService(db, self.identity_service)
        self.sequence_service = sequence_service or SequenceService(db)
        self.record_repo = MedicalRecordRepository(db)
        self.clock = clock

    def add_record(
        self,
        caller: str,
        patient_identity: str,
        diagnosis: str,
        prescription: str = "",
        lab_results_reference: str = ""
    ) -> MedicalRecord:
        """Doctor adds a medical record for a registered patient"""
        require_role(self.identity_service, caller, Role.DOCTOR)
        validate_identity(patient_identity, "patient_identity")

        if not self.patient_service.is_registered(patient_identity):
            logger.warning(f"Record rejected: {patient_identity} has no patient profile")
            raise PatientNotRegistered(details={"patient_identity": patient_identity})

        try:
            record_in = MedicalRecordCreate(
                diagnosis=diagnosis,
                prescription=prescription,
                lab_results_reference=lab_results_reference
            )
        except PydanticValidationError as e:
            raise ValidationError(
                message="Invalid medical record",
                details={"errors": e.errors(include_url=False, include_context=False)}
            ) from e

        record_id = self.sequence_service.next_record_id()
        record_dict = record_in.model_dump()
        record_dict.update({
            "id": record_id,
            "patient_identity": patient_identity,
            "doctor_identity": caller,
            "created_at": self.clock(),
        })
        record = self.record_repo.create(record_dict)
        self.record_repo.append_to_patient_index(patient_identity, record_id)
        self.record_repo.append_to_doctor_index(caller, record_id)

        AuditLogger.emit(
            self.db,
            AuditEvent.MEDICAL_RECORD_ADDED,
            actor=caller,
            subject=patient_identity,
            entity_id=record_id
        )
        return record

    def update_lab_results(self, caller: str, record_id: int, lab_results_reference: str) -> MedicalRecord:
        """Lab overwrites the lab results reference of an existing record"""
        require_role(self.identity_service, caller, Role.LAB)

        record = self.record_repo.get_by_id(record_id)
        if record is None or not record.patient_identity:
            raise RecordNotFound(details={"record_id": record_id})

        try:
            update_in = LabResultsUpdate(lab_results_reference=lab_results_reference)
        except PydanticValidationError as e:
            raise ValidationError(
                message="Invalid lab results reference",
                details={"errors": e.errors(include_url=False, include_context=False)}
            ) from e

        previous = record.lab_results_reference
        record = self.record_repo.update_fields(record, update_in.model_dump())

        AuditLogger.emit(
            self.db,
            AuditEvent.LAB_RESULTS_UPDATED,
            actor=caller,
            subject=record.patient_identity,
            entity_id=record_id,
            details={"previous_reference": previous, "reference": lab_results_reference}
        )
        return record

    def get(self, record_id: int) -> Optional[MedicalRecord]:
        return self.record_repo.get_by_id(record_id)

    def view(self, caller: str, record_id: int) -> MedicalRecord:
        """Record lookup restricted to doctors and the owning patient"""
        record = self.record_repo.get_by_id(record_id)
        if record is None:
            raise RecordNotFound(details={"record_id": record_id})
        require_doctor_or_self_patient(self.identity_service, caller, record.patient_identity)
        return record

    def records_for(self, caller: str, patient_identity: str) -> List[MedicalRecord]:
        """All records of a patient, for doctors and the patient themself"""
        require_doctor_or_self_patient(self.identity_service, caller, patient_identity)
        return self.record_repo.get_patient_records(patient_identity)

    def record_ids_of_patient(self, patient_identity: str) -> List[int]:
        return self.record_repo.get_patient_record_ids(patient_identity)

    def record_ids_of_doctor(self, doctor_identity: str) -> List[int]:
        return self.record_repo.get_doctor_record_ids(doctor_identity)
