"""
Registry facade.

Owns the store and exposes the public operations. Every mutating call runs as
one unit of work: guards first, then a single all-or-nothing transaction. The
caller identity is always an explicit argument.
"""

from typing import Optional, List
from datetime import datetime
import logging
from sqlalchemy.orm import Session

from medledger.core.clock import Clock, utcnow
from medledger.core.config import Settings
from medledger.core.events import AuditLogger
from medledger.domain.appointments.service import AppointmentService
from medledger.domain.audit.models import AuditEvent
from medledger.domain.identity.models import Role
from medledger.domain.identity.service import IdentityService
from medledger.domain.patients.service import PatientService
from medledger.domain.records.service import MedicalRecordService
from medledger.domain.sequences.models import APPOINTMENT_SEQUENCE, RECORD_SEQUENCE
from medledger.domain.sequences.service import SequenceService
from medledger.infrastructure.database import Database
from medledger.schemas.appointment import AppointmentRead
from medledger.schemas.audit import AuditLogRead
from medledger.schemas.medical_record import MedicalRecordRead
from medledger.schemas.patient import PatientProfileRead

logger = logging.getLogger(__name__)


class Registry:
    """Permissioned registry of patients, doctors, labs and their records"""

    def __init__(
        self,
        deployer: str,
        settings: Optional[Settings] = None,
        database: Optional[Database] = None,
        clock: Clock = utcnow
    ):
        self.database = database or Database(settings)
        self.clock = clock
        self.database.init_db()

        with self.database.unit_of_work("bootstrap") as db:
            IdentityService(db).bootstrap_admin(deployer)
        logger.info(f"Registry created by {deployer}")

    @classmethod
    def open(cls, database: Database, clock: Clock = utcnow) -> "Registry":
        """Attach to a store that was bootstrapped before"""
        registry = cls.__new__(cls)
        registry.database = database
        registry.clock = clock
        return registry

    # Service wiring, one set per session

    def _appointments(self, db: Session) -> AppointmentService:
        return AppointmentService(db, clock=self.clock)

    def _records(self, db: Session) -> MedicalRecordService:
        return MedicalRecordService(db, clock=self.clock)

    # Mutating operations

    def register_doctor(self, caller: str, address: str) -> None:
        with self.database.unit_of_work("register_doctor") as db:
            self._appointments(db).register_doctor(caller, address)

    def register_lab(self, caller: str, address: str) -> None:
        with self.database.unit_of_work("register_lab") as db:
            self._appointments(db).register_lab(caller, address)

    def register_patient(self, caller: str, name: str, age: int, contact_info: str = "") -> None:
        with self.database.unit_of_work("register_patient") as db:
            PatientService(db).register_self(caller, name, age, contact_info)

    def schedule_appointment(self, caller: str, doctor_address: str, time: datetime) -> int:
        with self.database.unit_of_work("schedule_appointment") as db:
            appointment = self._appointments(db).schedule(caller, caller, doctor_address, time)
            return appointment.id

    def confirm_appointment(self, caller: str, appointment_id: int) -> None:
        with self.database.unit_of_work("confirm_appointment") as db:
            self._appointments(db).confirm(caller, appointment_id)

    def add_medical_record(
        self,
        caller: str,
        patient_address: str,
        diagnosis: str,
        prescription: str = "",
        lab_results_ref: str = ""
    ) -> int:
        with self.database.unit_of_work("add_medical_record") as db:
            record = self._records(db).add_record(
                caller, patient_address, diagnosis, prescription, lab_results_ref
            )
            return record.id

    def add_lab_results(self, caller: str, record_id: int, lab_results_ref: str) -> None:
        with self.database.unit_of_work("add_lab_results") as db:
            self._records(db).update_lab_results(caller, record_id, lab_results_ref)

    # Read-only accessors

    def role_of(self, identity: str) -> Role:
        with self.database.session() as db:
            return IdentityService(db).role_of(identity)

    def admin(self) -> Optional[str]:
        with self.database.session() as db:
            return IdentityService(db).admin()

    def patient_profile(self, identity: str) -> Optional[PatientProfileRead]:
        with self.database.session() as db:
            profile = PatientService(db).profile_of(identity)
            return PatientProfileRead.model_validate(profile) if profile else None

    def appointment(self, appointment_id: int) -> Optional[AppointmentRead]:
        with self.database.session() as db:
            appointment = self._appointments(db).get(appointment_id)
            return AppointmentRead.model_validate(appointment) if appointment else None

    def medical_record(self, record_id: int) -> Optional[MedicalRecordRead]:
        with self.database.session() as db:
            record = self._records(db).get(record_id)
            return MedicalRecordRead.model_validate(record) if record else None

    def patient_appointments(self, identity: str) -> List[int]:
        with self.database.session() as db:
            return self._appointments(db).appointment_ids_of(identity)

    def patient_records(self, identity: str) -> List[int]:
        with self.database.session() as db:
            return self._records(db).record_ids_of_patient(identity)

    def doctor_records(self, identity: str) -> List[int]:
        with self.database.session() as db:
            return self._records(db).record_ids_of_doctor(identity)

    def next_appointment_id(self) -> int:
        with self.database.session() as db:
            return SequenceService(db).peek(APPOINTMENT_SEQUENCE)

    def next_record_id(self) -> int:
        with self.database.session() as db:
            return SequenceService(db).peek(RECORD_SEQUENCE)

    def view_medical_record(self, caller: str, record_id: int) -> MedicalRecordRead:
        with self.database.session() as db:
            return MedicalRecordRead.model_validate(self._records(db).view(caller, record_id))

    def medical_records_for(self, caller: str, patient_address: str) -> List[MedicalRecordRead]:
        with self.database.session() as db:
            records = self._records(db).records_for(caller, patient_address)
            return [MedicalRecordRead.model_validate(r) for r in records]

    def audit_trail(
        self,
        event: Optional[AuditEvent] = None,
        actor: Optional[str] = None
    ) -> List[AuditLogRead]:
        with self.database.session() as db:
            return [AuditLogRead.model_validate(e) for e in AuditLogger.trail(db, event, actor)]
