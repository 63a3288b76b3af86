"""MedLedger: permissioned registry of patients, doctors, labs and their records."""

from medledger.registry import Registry
from medledger.domain.identity.models import Role
from medledger.domain.audit.models import AuditEvent

__version__ = "0.1.0"

__all__ = ["Registry", "Role", "AuditEvent", "__version__"]
