from typing import Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, field_validator

from medledger.domain.appointments.models import AppointmentStatus


class AppointmentCreate(BaseModel):
    doctor_identity: str
    scheduled_time: datetime

    @field_validator("scheduled_time")
    @classmethod
    def as_naive_utc(cls, v: datetime) -> datetime:
        # Stored without timezone, always UTC
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class AppointmentRead(BaseModel):
    id: int
    patient_identity: str
    doctor_identity: str
    scheduled_time: datetime
    confirmed: bool
    status: AppointmentStatus
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
