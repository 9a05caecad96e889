from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class PatientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class PatientCreate(PatientBase):
    pass


class PatientUpdate(PatientBase):
    pass


class PatientResponse(PatientBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
