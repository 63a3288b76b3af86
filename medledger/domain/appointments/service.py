"""
Appointments Service Layer

Business logic for doctor/lab registration, appointment scheduling and
confirmation. Every operation checks its guard first and only then touches
state.
"""

from typing import Optional, List
from datetime import datetime
import logging
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from medledger.core.clock import Clock, utcnow
from medledger.core.events import AuditLogger
from medledger.core.exceptions import (
    AlreadyConfirmed, AlreadyRegistered, AppointmentNotFound,
    DoctorNotRegistered, NotAssignedDoctor, ValidationError
)
from medledger.core.permissions import require_role, require_self_and_role
from medledger.domain.appointments.models import Appointment
from medledger.domain.appointments.repository import AppointmentRepository
from medledger.domain.audit.models import AuditEvent
from medledger.domain.identity.models import Role
from medledger.domain.identity.service import IdentityService, validate_identity
from medledger.domain.sequences.service import SequenceService
from medledger.schemas.appointment import AppointmentCreate

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for appointment management"""

    def __init__(
        self,
        db: Session,
        identity_service: Optional[IdentityService] = None,
        sequence_service: Optional[SequenceService] = None,
        clock: Clock = utcnow
    ):
        self.db = db
        self.identity_service = identity_service or IdentityService(db)
        self.sequence_service = sequence_service or SequenceService(db)
        self.appointment_repo = AppointmentRepository(db)
        self.clock = clock

    def _register_provider(self, caller: str, identity: str, role: Role, event: AuditEvent) -> None:
        require_role(self.identity_service, caller, Role.ADMIN)
        validate_identity(identity)

        if self.identity_service.role_of(identity) == role:
            logger.warning(f"{role.value} registration rejected: {identity} is already registered")
            raise AlreadyRegistered(
                message=f"{identity} is already a registered {role.value.lower()}",
                details={"identity": identity, "role": role.value}
            )

        # Any other role held by the target raises RoleAlreadyAssigned
        self.identity_service.assign(identity, role, assigned_by=caller)
        AuditLogger.emit(self.db, event, actor=caller, subject=identity)

    def register_doctor(self, caller: str, identity: str) -> None:
        """Administrator registers a doctor"""
        self._register_provider(caller, identity, Role.DOCTOR, AuditEvent.DOCTOR_REGISTERED)

    def register_lab(self, caller: str, identity: str) -> None:
        """Administrator registers a lab"""
        self._register_provider(caller, identity, Role.LAB, AuditEvent.LAB_REGISTERED)

    def schedule(
        self,
        caller: str,
        patient_identity: str,
        doctor_identity: str,
        scheduled_time: datetime
    ) -> Appointment:
        """Patient books an appointment with a registered doctor"""
        require_self_and_role(self.identity_service, caller, patient_identity, Role.PATIENT)

        try:
            appointment_in = AppointmentCreate(
                doctor_identity=doctor_identity,
                scheduled_time=scheduled_time
            )
        except PydanticValidationError as e:
            raise ValidationError(
                message="Invalid appointment",
                details={"errors": e.errors(include_url=False, include_context=False)}
            ) from e

        if self.identity_service.role_of(appointment_in.doctor_identity) != Role.DOCTOR:
            logger.warning(f"Scheduling rejected: {doctor_identity} is not a registered doctor")
            raise DoctorNotRegistered(details={"doctor_identity": doctor_identity})

        appointment_id = self.sequence_service.next_appointment_id()
        appointment = self.appointment_repo.create({
            "id": appointment_id,
            "patient_identity": patient_identity,
            "doctor_identity": appointment_in.doctor_identity,
            "scheduled_time": appointment_in.scheduled_time,
            "confirmed": False,
            "created_at": self.clock(),
        })
        self.appointment_repo.append_to_patient_index(patient_identity, appointment_id)

        AuditLogger.emit(
            self.db,
            AuditEvent.APPOINTMENT_SCHEDULED,
            actor=caller,
            subject=appointment_in.doctor_identity,
            entity_id=appointment_id,
            details={"scheduled_time": appointment_in.scheduled_time.isoformat()}
        )
        return appointment

    def confirm(self, caller: str, appointment_id: int) -> Appointment:
        """Assigned doctor confirms an appointment, exactly once"""
        require_role(self.identity_service, caller, Role.DOCTOR)

        appointment = self.appointment_repo.get_by_id(appointment_id)
        if appointment is None:
            raise AppointmentNotFound(details={"appointment_id": appointment_id})

        if appointment.doctor_identity != caller:
            logger.warning(f"Confirmation rejected: {caller} is not the doctor of appointment {appointment_id}")
            raise NotAssignedDoctor(
                details={"appointment_id": appointment_id, "identity": caller}
            )

        if appointment.confirmed:
            raise AlreadyConfirmed(details={"appointment_id": appointment_id})

        appointment = self.appointment_repo.mark_confirmed(appointment, self.clock())
        AuditLogger.emit(
            self.db,
            AuditEvent.APPOINTMENT_CONFIRMED,
            actor=caller,
            subject=appointment.patient_identity,
            entity_id=appointment_id
        )
        return appointment

    def get(self, appointment_id: int) -> Optional[Appointment]:
        return self.appointment_repo.get_by_id(appointment_id)

    def appointment_ids_of(self, patient_identity: str) -> List[int]:
        return self.appointment_repo.get_patient_appointment_ids(patient_identity)
