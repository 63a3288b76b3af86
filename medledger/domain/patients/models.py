from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text
from sqlalchemy.sql import func
from medledger.infrastructure.database import Base


class PatientProfile(Base):
    """Patient profile, created once by the patient's own registration"""
    __tablename__ = "patient_profiles"

    identity = Column(String(255), primary_key=True)
    name = Column(Text, nullable=False)
    age = Column(Integer, nullable=False)
    contact_info = Column(Text, nullable=False, default="")
    registered = Column(Boolean, nullable=False, default=True)
    registered_at = Column(DateTime, default=func.now())
