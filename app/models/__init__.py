from app.models.user import User
from app.models.patient import Patient
from app.models.medical_order import MedicalOrder

__all__ = ["User", "Patient", "MedicalOrder"]
