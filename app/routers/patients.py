from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.database import get_db
from app.models.patient import Patient
from app.models.medical_order import MedicalOrder
from app.schemas.patient import PatientCreate, PatientUpdate, PatientResponse
from app.schemas.medical_order import MedicalOrderResponse
from app.auth import get_current_user

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[PatientResponse])
async def list_patients(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Patient).order_by(Patient.created_at, Patient.id))
    return [PatientResponse.model_validate(p) for p in result.scalars().all()]


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(patient_id: str, db: AsyncSession = Depends(get_db)):
    patient = await db.get(Patient, patient_id)
    if not patient:
        return Response(status_code=404)
    return PatientResponse.model_validate(patient)


@router.post("", response_model=PatientResponse, status_code=201)
async def create_patient(data: PatientCreate, response: Response, db: AsyncSession = Depends(get_db)):
    patient = Patient(**data.model_dump())
    db.add(patient)
    await db.commit()
    await db.refresh(patient)
    response.headers["Location"] = f"/api/patients/{patient.id}"
    return PatientResponse.model_validate(patient)


@router.put("/{patient_id}", response_model=PatientResponse)
async def update_patient(patient_id: str, data: PatientUpdate, db: AsyncSession = Depends(get_db)):
    patient = await db.get(Patient, patient_id)
    if not patient:
        return Response(status_code=404)

    patient.name = data.name

    await db.commit()
    await db.refresh(patient)
    return PatientResponse.model_validate(patient)


@router.delete("/{patient_id}", status_code=204)
async def delete_patient(patient_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a patient together with all of its medical orders."""
    patient = await db.get(Patient, patient_id)
    if not patient:
        return Response(status_code=404)

    await db.delete(patient)
    await db.commit()
    return Response(status_code=204)


@router.get("/{patient_id}/medicalorders", response_model=list[MedicalOrderResponse])
async def list_patient_orders(patient_id: str, db: AsyncSession = Depends(get_db)):
    """Orders for one patient; 404 when the patient is unknown or has none."""
    result = await db.execute(
        select(MedicalOrder)
        .where(MedicalOrder.patient_id == patient_id)
        .order_by(MedicalOrder.created_at, MedicalOrder.id)
    )
    orders = result.scalars().all()
    if not orders:
        return Response(status_code=404)
    return [MedicalOrderResponse.model_validate(o) for o in orders]
