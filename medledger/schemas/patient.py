from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class PatientCreate(BaseModel):
    name: str
    age: int = Field(..., ge=0)
    contact_info: str = ""


class PatientProfileRead(BaseModel):
    identity: str
    name: str
    age: int
    contact_info: str
    registered: bool
    registered_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
