from __future__ import annotations
import logging

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.errors import ForbiddenError
from carebridge.models import User, PATIENT, CAREGIVER
from carebridge.services.auth_service import get_current_user

logger = logging.getLogger(__name__)


def authorize_own_patient(caller: User) -> int:
    """
    본인 데이터 경로(/medications 등)의 권한 확인.
    범위는 항상 호출자 본인 id이며, 보호자는 자기 소유 데이터가 없으므로 거부합니다.
    """
    if caller.role != PATIENT:
        logger.warning("User %s (role=%s) denied on a patient-only route", caller.id, caller.role)
        raise ForbiddenError("patient role required")
    return caller.id


async def authorize_caregiver_for_patient(db: AsyncSession, caregiver_id: int, patient_id: int) -> bool:
    # 매 요청마다 현재 DB 상태로 판단 (세션 단위 캐시 없음)
    q = select(User.id).where(
        User.id == patient_id,
        User.role == PATIENT,
        User.paired_caregiver_id == caregiver_id,
    )
    return (await db.execute(q)).scalar_one_or_none() is not None


async def require_caregiver_for_patient(db: AsyncSession, caregiver_id: int, patient_id: int) -> None:
    """(헬퍼 함수) 보호자가 해당 환자와 연결되어 있지 않으면 ForbiddenError"""
    if not await authorize_caregiver_for_patient(db, caregiver_id, patient_id):
        logger.warning("Caregiver %s denied access to patient %s", caregiver_id, patient_id)
        raise ForbiddenError("caregiver is not assigned to this patient")


async def get_current_patient(current_user: User = Depends(get_current_user)) -> User:
    authorize_own_patient(current_user)
    return current_user


async def get_current_caregiver(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != CAREGIVER:
        logger.warning("User %s (role=%s) denied on a caregiver-only route", current_user.id, current_user.role)
        raise ForbiddenError("caregiver role required")
    return current_user
