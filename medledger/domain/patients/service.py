from typing import Optional
import logging
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from medledger.core.events import AuditLogger
from medledger.core.exceptions import RoleAlreadyAssigned, ValidationError
from medledger.domain.audit.models import AuditEvent
from medledger.domain.identity.models import Role
from medledger.domain.identity.service import IdentityService, validate_identity
from medledger.domain.patients.models import PatientProfile
from medledger.domain.patients.repository import PatientRepository
from medledger.schemas.patient import PatientCreate

logger = logging.getLogger(__name__)


class PatientService:
    """Service layer for patient self-registration and profile lookups"""

    def __init__(self, db: Session, identity_service: Optional[IdentityService] = None):
        self.db = db
        self.identity_service = identity_service or IdentityService(db)
        self.patient_repo = PatientRepository(db)

    def register_self(self, identity: str, name: str, age: int, contact_info: str = "") -> PatientProfile:
        """Register the calling identity as a patient"""
        validate_identity(identity)
        current = self.identity_service.role_of(identity)
        if current != Role.UNASSIGNED:
            logger.warning(f"Patient registration rejected: {identity} already holds {current.value}")
            raise RoleAlreadyAssigned(details={"identity": identity, "role": current.value})

        try:
            patient_in = PatientCreate(name=name, age=age, contact_info=contact_info)
        except PydanticValidationError as e:
            raise ValidationError(
                message="Invalid patient profile",
                details={"errors": e.errors(include_url=False, include_context=False)}
            ) from e

        patient_dict = patient_in.model_dump()
        patient_dict.update({
            "identity": identity,
            "registered": True,
        })
        profile = self.patient_repo.create(patient_dict)
        self.identity_service.assign(identity, Role.PATIENT, assigned_by=identity)

        AuditLogger.emit(
            self.db,
            AuditEvent.PATIENT_REGISTERED,
            actor=identity,
            subject=identity,
            details={"name": profile.name, "age": profile.age}
        )
        return profile

    def profile_of(self, identity: str) -> Optional[PatientProfile]:
        """Get a patient's profile, None when not registered"""
        return self.patient_repo.get_by_identity(identity)

    def is_registered(self, identity: str) -> bool:
        return self.patient_repo.exists(identity)
