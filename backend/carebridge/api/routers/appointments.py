from __future__ import annotations
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.db import get_db
from carebridge.models import User, Appointment
from carebridge.services import resources
from carebridge.services.access_guard import get_current_patient
from carebridge.schemas import AppointmentCreate, AppointmentUpdate, AppointmentPublic, MessageResponse

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("", response_model=List[AppointmentPublic])
async def list_appointments(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    return await resources.list_rows(db, Appointment, current_user.id)


@router.post("", response_model=AppointmentPublic)
async def add_appointment(
    payload: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    return await resources.create_row(db, Appointment, current_user.id, payload.model_dump())


@router.put("/{appointment_id}", response_model=AppointmentPublic)
async def update_appointment(
    appointment_id: int,
    payload: AppointmentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    return await resources.update_row(
        db, Appointment, current_user.id, appointment_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{appointment_id}", response_model=MessageResponse)
async def delete_appointment(
    appointment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    await resources.delete_row(db, Appointment, current_user.id, appointment_id)
    return {"message": "Appointment deleted"}
