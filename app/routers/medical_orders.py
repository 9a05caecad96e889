from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
from app.database import get_db
from app.models.patient import Patient
from app.models.medical_order import MedicalOrder
from app.schemas.medical_order import MedicalOrderCreate, MedicalOrderUpdate, MedicalOrderResponse
from app.auth import get_current_user

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[MedicalOrderResponse])
async def list_orders(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(MedicalOrder).order_by(MedicalOrder.created_at, MedicalOrder.id))
    return [MedicalOrderResponse.model_validate(o) for o in result.scalars().all()]


@router.get("/{order_id}", response_model=MedicalOrderResponse)
async def get_order(order_id: str, db: AsyncSession = Depends(get_db)):
    order = await db.get(MedicalOrder, order_id)
    if not order:
        return Response(status_code=404)
    return MedicalOrderResponse.model_validate(order)


@router.post("", response_model=MedicalOrderResponse, status_code=201)
async def create_order(data: MedicalOrderCreate, response: Response, db: AsyncSession = Depends(get_db)):
    if await db.get(Patient, data.patient_id) is None:
        raise HTTPException(status_code=400, detail="Patient not found")

    order = MedicalOrder(**data.model_dump())
    db.add(order)
    try:
        await db.commit()
    except IntegrityError:
        # Patient deleted between the lookup and the insert.
        await db.rollback()
        raise HTTPException(status_code=400, detail="Patient not found")
    await db.refresh(order)
    response.headers["Location"] = f"/api/medicalorders/{order.id}"
    return MedicalOrderResponse.model_validate(order)


@router.put("/{order_id}", response_model=MedicalOrderResponse)
async def update_order(order_id: str, data: MedicalOrderUpdate, db: AsyncSession = Depends(get_db)):
    order = await db.get(MedicalOrder, order_id)
    if not order:
        return Response(status_code=404)

    order.message = data.message

    await db.commit()
    await db.refresh(order)
    return MedicalOrderResponse.model_validate(order)


@router.delete("/{order_id}", status_code=204)
async def delete_order(order_id: str, db: AsyncSession = Depends(get_db)):
    order = await db.get(MedicalOrder, order_id)
    if not order:
        return Response(status_code=404)

    await db.delete(order)
    await db.commit()
    return Response(status_code=204)
