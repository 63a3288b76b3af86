from datetime import datetime
from pydantic import BaseModel, ConfigDict


class MedicalRecordCreate(BaseModel):
    diagnosis: str
    prescription: str = ""
    lab_results_reference: str = ""


class LabResultsUpdate(BaseModel):
    lab_results_reference: str


class MedicalRecordRead(BaseModel):
    id: int
    patient_identity: str
    doctor_identity: str
    diagnosis: str
    prescription: str
    lab_results_reference: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
