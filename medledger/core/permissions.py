"""
Access guard for the registry.

Each ``require_*`` function is called explicitly at the top of an operation,
before any state is touched, and raises ``AccessDenied`` when the caller does
not qualify. ``PermissionChecker`` exposes the same rules as booleans.
"""

from typing import Protocol
import logging

from medledger.core.exceptions import AccessDenied
from medledger.domain.identity.models import Role

logger = logging.getLogger(__name__)


class RoleLookup(Protocol):
    def role_of(self, identity: str) -> Role: ...


def require_role(registry: RoleLookup, identity: str, role: Role) -> None:
    """Caller must hold exactly ``role``"""
    actual = registry.role_of(identity)
    if actual != role:
        logger.warning(f"Access denied: {identity} has role {actual.value}, requires {role.value}")
        raise AccessDenied(
            message=f"Operation requires role {role.value}",
            details={"identity": identity, "role": actual.value, "required_role": role.value}
        )


def require_self_and_role(registry: RoleLookup, identity: str, claimed_identity: str, role: Role) -> None:
    """Caller must act on its own behalf and hold ``role``"""
    if identity != claimed_identity:
        logger.warning(f"Access denied: {identity} tried to act as {claimed_identity}")
        raise AccessDenied(
            message="Callers may only act on their own behalf",
            details={"identity": identity, "claimed_identity": claimed_identity}
        )
    require_role(registry, identity, role)


def require_doctor_or_self_patient(registry: RoleLookup, identity: str, record_owner_identity: str) -> None:
    """Caller must be any doctor, or the patient who owns the record"""
    if PermissionChecker.is_doctor_or_self_patient(registry, identity, record_owner_identity):
        return
    logger.warning(f"Access denied: {identity} may not access records of {record_owner_identity}")
    raise AccessDenied(
        message="Only doctors or the owning patient may access this record",
        details={"identity": identity, "record_owner": record_owner_identity}
    )


class PermissionChecker:
    """Helper class for checking permissions without raising"""

    @staticmethod
    def is_doctor_or_self_patient(registry: RoleLookup, identity: str, record_owner_identity: str) -> bool:
        role = registry.role_of(identity)
        if role == Role.DOCTOR:
            return True
        return role == Role.PATIENT and identity == record_owner_identity
