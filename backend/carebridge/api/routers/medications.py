from __future__ import annotations
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.db import get_db
from carebridge.models import User, Medication
from carebridge.services import resources
from carebridge.services.access_guard import get_current_patient
from carebridge.schemas import MedicationCreate, MedicationUpdate, MedicationPublic, MessageResponse

# 환자 본인 복약 목록. 조회/수정/삭제 모두 user_id = 로그인한 환자로 고정
router = APIRouter(prefix="/medications", tags=["medications"])


@router.get("", response_model=List[MedicationPublic])
async def list_medications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    return await resources.list_rows(db, Medication, current_user.id)


@router.post("", response_model=MedicationPublic)
async def add_medication(
    payload: MedicationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    return await resources.create_row(db, Medication, current_user.id, payload.model_dump())


@router.put("/{medication_id}", response_model=MedicationPublic)
async def update_medication(
    medication_id: int,
    payload: MedicationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    return await resources.update_row(
        db, Medication, current_user.id, medication_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{medication_id}", response_model=MessageResponse)
async def delete_medication(
    medication_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    await resources.delete_row(db, Medication, current_user.id, medication_id)
    return {"message": "Medication deleted"}
