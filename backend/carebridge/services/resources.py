from __future__ import annotations
import logging
from typing import Any, Dict, List, Type, TypeVar

from sqlalchemy import select, insert, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.db import Base
from carebridge.errors import NotFoundError, ValidationError
from carebridge.models import Medication, Appointment, DailyTask

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

_LABELS = {
    Medication: "medication",
    Appointment: "appointment",
    DailyTask: "daily task",
}


def _label(model: Type[Base]) -> str:
    return _LABELS.get(model, model.__tablename__)


async def list_rows(db: AsyncSession, model: Type[ModelT], patient_id: int) -> List[ModelT]:
    q = select(model).where(model.user_id == patient_id).order_by(model.id)
    return list((await db.execute(q)).scalars().all())


async def create_row(db: AsyncSession, model: Type[ModelT], patient_id: int, data: Dict[str, Any]) -> ModelT:
    """
    user_id는 항상 인자로 받은 환자 id로 고정합니다.
    (본인이 추가하든 보호자가 대신 추가하든 같은 행이 만들어짐)
    """
    values = {k: v for k, v in data.items() if k not in ("id", "user_id")}
    res = await db.execute(
        insert(model).values(user_id=patient_id, **values).returning(model)
    )
    row = res.scalar_one()
    await db.commit()
    logger.info("Created %s id=%s for patient %s", _label(model), row.id, patient_id)
    return row


async def update_row(
    db: AsyncSession, model: Type[ModelT], patient_id: int, row_id: int, data: Dict[str, Any]
) -> ModelT:
    values = {k: v for k, v in data.items() if k not in ("id", "user_id")}
    if not values:
        raise ValidationError("nothing to update")

    res = await db.execute(
        update(model)
        .where(model.id == row_id, model.user_id == patient_id)
        .values(**values)
        .returning(model)
        .execution_options(synchronize_session=False)
    )
    row = res.scalar_one_or_none()
    if row is None:
        await db.rollback()
        raise NotFoundError(f"{_label(model)} not found")
    await db.commit()
    return row


async def delete_row(db: AsyncSession, model: Type[ModelT], patient_id: int, row_id: int) -> None:
    res = await db.execute(
        delete(model)
        .where(model.id == row_id, model.user_id == patient_id)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        await db.rollback()
        raise NotFoundError(f"{_label(model)} not found")
    await db.commit()
    logger.info("Deleted %s id=%s for patient %s", _label(model), row_id, patient_id)
