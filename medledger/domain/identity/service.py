"""
Identity Service Layer

Source of truth for which role an identity holds. Roles are assigned once and
never changed or revoked.
"""

from typing import Optional
import logging
from sqlalchemy.orm import Session

from medledger.core.exceptions import (
    AccessDenied, AdminAlreadyExists, RoleAlreadyAssigned, ValidationError
)
from medledger.domain.identity.models import Role
from medledger.domain.identity.repository import IdentityRepository

logger = logging.getLogger(__name__)


def validate_identity(identity: str, field: str = "identity") -> str:
    """Reject empty or non-string identities"""
    if not isinstance(identity, str) or not identity.strip():
        raise ValidationError(
            message=f"{field} must be a non-empty string",
            details={"field": field, "value": repr(identity)}
        )
    return identity


class IdentityService:
    """Service layer for role lookups and assignment"""

    def __init__(self, db: Session):
        self.db = db
        self.identity_repo = IdentityRepository(db)

    def role_of(self, identity: str) -> Role:
        """Role held by an identity, UNASSIGNED when unknown"""
        row = self.identity_repo.get(identity)
        if row is None:
            return Role.UNASSIGNED
        return row.role

    def assign(self, identity: str, role: Role, assigned_by: Optional[str] = None) -> None:
        """Assign a role to an identity that holds none"""
        validate_identity(identity)
        if role == Role.UNASSIGNED:
            raise ValidationError(message="Cannot assign the UNASSIGNED role")
        if role == Role.ADMIN:
            raise AccessDenied(
                message="The administrator role is only granted at construction",
                details={"identity": identity}
            )

        current = self.role_of(identity)
        if current != Role.UNASSIGNED:
            raise RoleAlreadyAssigned(
                details={"identity": identity, "role": current.value, "requested_role": role.value}
            )

        self.identity_repo.create(identity, role, assigned_by=assigned_by)
        logger.info(f"Assigned role {role.value} to {identity}")

    def bootstrap_admin(self, identity: str) -> None:
        """Make the constructing identity the single administrator"""
        validate_identity(identity)
        if self.identity_repo.count_by_role(Role.ADMIN):
            raise AdminAlreadyExists(details={"identity": identity})
        if self.role_of(identity) != Role.UNASSIGNED:
            raise RoleAlreadyAssigned(details={"identity": identity})

        self.identity_repo.create(identity, Role.ADMIN, assigned_by=identity)
        logger.info(f"Registry administrator set to {identity}")

    def admin(self) -> Optional[str]:
        """Identity of the administrator"""
        admins = self.identity_repo.get_by_role(Role.ADMIN)
        return admins[0].identity if admins else None
