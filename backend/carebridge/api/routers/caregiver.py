from __future__ import annotations
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.db import get_db
from carebridge.errors import ForbiddenError
from carebridge.models import User, Medication, Appointment, DailyTask
from carebridge.services import pairing, resources
from carebridge.services.access_guard import get_current_caregiver, require_caregiver_for_patient
from carebridge.schemas import (
    UserPublic, AssignedPatient, MessageResponse,
    MedicationCreate, MedicationUpdate, MedicationPublic,
    AppointmentCreate, AppointmentUpdate, AppointmentPublic,
    DailyTaskCreate, DailyTaskUpdate, DailyTaskPublic,
)

router = APIRouter(prefix="/caregiver", tags=["caregiver"])


# ===== 페어링 =====

# [1] 나에게 들어온 대기 중인 연결 요청
@router.get("/pending-patients", response_model=List[UserPublic])
async def get_pending_patients(
    caregiver_id: Optional[int] = Query(None, alias="caregiverId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    """
    pending 값이 '나'인 환자만 반환합니다 (연결 안 된 환자 전체가 아님).
    caregiverId 쿼리는 구버전 호환용이며 로그인한 보호자와 같아야 합니다.
    """
    if caregiver_id is not None and caregiver_id != current_user.id:
        raise ForbiddenError("cannot list requests of another caregiver")
    return await pairing.list_pending_patients(db, current_user.id)


# [2] 연결 요청 수락
@router.post("/accept-patient/{patient_id}", response_model=MessageResponse)
async def accept_patient(
    patient_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await pairing.accept_patient(db, current_user.id, patient_id)
    return {"message": "Patient accepted"}


# [3] 나와 연결된 환자 목록 (id, name만)
@router.get("/assigned-patients", response_model=List[AssignedPatient])
async def get_assigned_patients(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    return await pairing.list_assigned_patients(db, current_user.id)


# ===== 환자 대신 조회/추가 =====
# 모든 경로는 데이터 작업 전에 require_caregiver_for_patient 먼저 호출

@router.get("/patient-medications", response_model=List[MedicationPublic])
async def get_patient_medications(
    patient_id: int = Query(..., alias="patientId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    return await resources.list_rows(db, Medication, patient_id)


@router.get("/patient-appointments", response_model=List[AppointmentPublic])
async def get_patient_appointments(
    patient_id: int = Query(..., alias="patientId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    return await resources.list_rows(db, Appointment, patient_id)


@router.get("/patient-daily-tasks", response_model=List[DailyTaskPublic])
async def get_patient_daily_tasks(
    patient_id: int = Query(..., alias="patientId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    return await resources.list_rows(db, DailyTask, patient_id)


@router.post("/add-medication/{patient_id}", response_model=MedicationPublic)
async def add_patient_medication(
    patient_id: int,
    payload: MedicationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    return await resources.create_row(db, Medication, patient_id, payload.model_dump())


@router.post("/add-appointment/{patient_id}", response_model=AppointmentPublic)
async def add_patient_appointment(
    patient_id: int,
    payload: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    return await resources.create_row(db, Appointment, patient_id, payload.model_dump())


@router.post("/add-daily-task/{patient_id}", response_model=DailyTaskPublic)
async def add_patient_daily_task(
    patient_id: int,
    payload: DailyTaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    return await resources.create_row(db, DailyTask, patient_id, payload.model_dump())


# ===== 환자 대신 수정/삭제 =====

@router.put("/patients/{patient_id}/medications/{medication_id}", response_model=MedicationPublic)
async def update_patient_medication(
    patient_id: int,
    medication_id: int,
    payload: MedicationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    return await resources.update_row(
        db, Medication, patient_id, medication_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/patients/{patient_id}/medications/{medication_id}", response_model=MessageResponse)
async def delete_patient_medication(
    patient_id: int,
    medication_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    await resources.delete_row(db, Medication, patient_id, medication_id)
    return {"message": "Medication deleted"}


@router.put("/patients/{patient_id}/appointments/{appointment_id}", response_model=AppointmentPublic)
async def update_patient_appointment(
    patient_id: int,
    appointment_id: int,
    payload: AppointmentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    return await resources.update_row(
        db, Appointment, patient_id, appointment_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/patients/{patient_id}/appointments/{appointment_id}", response_model=MessageResponse)
async def delete_patient_appointment(
    patient_id: int,
    appointment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    await resources.delete_row(db, Appointment, patient_id, appointment_id)
    return {"message": "Appointment deleted"}


@router.put("/patients/{patient_id}/daily-tasks/{task_id}", response_model=DailyTaskPublic)
async def update_patient_daily_task(
    patient_id: int,
    task_id: int,
    payload: DailyTaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    return await resources.update_row(
        db, DailyTask, patient_id, task_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/patients/{patient_id}/daily-tasks/{task_id}", response_model=MessageResponse)
async def delete_patient_daily_task(
    patient_id: int,
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_caregiver),
):
    await require_caregiver_for_patient(db, current_user.id, patient_id)
    await resources.delete_row(db, DailyTask, patient_id, task_id)
    return {"message": "Daily task deleted"}
