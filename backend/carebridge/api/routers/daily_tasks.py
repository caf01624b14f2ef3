from __future__ import annotations
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.db import get_db
from carebridge.models import User, DailyTask
from carebridge.services import resources
from carebridge.services.access_guard import get_current_patient
from carebridge.schemas import DailyTaskCreate, DailyTaskUpdate, DailyTaskPublic, MessageResponse

router = APIRouter(prefix="/daily-tasks", tags=["daily-tasks"])


@router.get("", response_model=List[DailyTaskPublic])
async def list_daily_tasks(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    return await resources.list_rows(db, DailyTask, current_user.id)


@router.post("", response_model=DailyTaskPublic)
async def add_daily_task(
    payload: DailyTaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    return await resources.create_row(db, DailyTask, current_user.id, payload.model_dump())


@router.put("/{task_id}", response_model=DailyTaskPublic)
async def update_daily_task(
    task_id: int,
    payload: DailyTaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    return await resources.update_row(
        db, DailyTask, current_user.id, task_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_daily_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    await resources.delete_row(db, DailyTask, current_user.id, task_id)
    return {"message": "Daily task deleted"}
