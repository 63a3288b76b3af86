"""
Identity Domain Models

One row per identity holding a role. Identities without a row are unassigned.
"""

from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.sql import func
from medledger.infrastructure.database import Base
import enum


class Role(str, enum.Enum):
    """Role enumeration, mutually exclusive per identity"""
    PATIENT = "PATIENT"
    DOCTOR = "DOCTOR"
    LAB = "LAB"
    ADMIN = "ADMIN"
    UNASSIGNED = "UNASSIGNED"


class IdentityRole(Base):
    """Role held by an identity"""
    __tablename__ = "identity_roles"

    identity = Column(String(255), primary_key=True)
    role = Column(Enum(Role), nullable=False, index=True)
    assigned_at = Column(DateTime, default=func.now())
    assigned_by = Column(String(255))
