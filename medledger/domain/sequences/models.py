from sqlalchemy import Column, String, Integer
from medledger.infrastructure.database import Base


APPOINTMENT_SEQUENCE = "appointment"
RECORD_SEQUENCE = "medical_record"


class IdSequence(Base):
    """Next free ID of one entity kind"""
    __tablename__ = "id_sequences"

    name = Column(String(50), primary_key=True)
    next_value = Column(Integer, nullable=False, default=0)
