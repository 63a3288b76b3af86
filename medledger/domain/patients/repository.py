from typing import Optional
from sqlalchemy.orm import Session

from medledger.domain.patients.models import PatientProfile


class PatientRepository:
    """Repository for patient profile data access operations"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, patient_data: dict) -> PatientProfile:
        """Create a new patient profile"""
        profile = PatientProfile(**patient_data)
        self.db.add(profile)
        self.db.flush()
        return profile

    def get_by_identity(self, identity: str) -> Optional[PatientProfile]:
        """Get profile by identity"""
        if identity is None:
            return None
        return self.db.get(PatientProfile, identity)

    def exists(self, identity: str) -> bool:
        profile = self.get_by_identity(identity)
        return profile is not None and profile.registered
