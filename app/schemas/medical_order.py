from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class MedicalOrderCreate(BaseModel):
    message: str = Field(..., min_length=1)
    patient_id: str = Field(..., min_length=1, alias="patientId")

    class Config:
        populate_by_name = True


class MedicalOrderUpdate(BaseModel):
    message: str = Field(..., min_length=1)


class MedicalOrderResponse(BaseModel):
    id: str
    message: str
    patient_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
