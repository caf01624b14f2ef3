"""
Caregiver-patient pairing workflow.

Pairing state lives on the patient row only::

    Unpaired   paired_caregiver_id IS NULL, pending_caregiver_request_id IS NULL
    Requested  paired_caregiver_id IS NULL, pending_caregiver_request_id = <caregiver>
    Paired     paired_caregiver_id = <caregiver>, pending_caregiver_request_id IS NULL

Every transition is one UPDATE filtered on ``role = 'patient'``, so a
caregiver row can never pick up pairing columns and no transition is ever
half applied. ``accept_patient`` additionally conditions on the current
pending value and treats zero affected rows as failure, which is what makes
two concurrent accepts of the same request resolve to a single winner.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from carebridge.errors import InvalidRequestError, NotFoundError
from carebridge.models import User, PATIENT, CAREGIVER
from carebridge.services import user_directory

logger = logging.getLogger(__name__)

UNPAIRED = "unpaired"
REQUESTED = "requested"
PAIRED = "paired"


@dataclass(frozen=True)
class PairingState:
    state: str
    paired_caregiver_id: Optional[int]
    pending_caregiver_request_id: Optional[int]


def _patient_update(patient_id: int):
    return update(User).where(User.id == patient_id, User.role == PATIENT)


async def _resolve_caregiver(db: AsyncSession, caregiver_username: str) -> User:
    caregiver = await user_directory.find_by_username_and_role(db, caregiver_username, CAREGIVER)
    if caregiver is None:
        raise NotFoundError("caregiver not found")
    return caregiver


async def request_caregiver(db: AsyncSession, patient_id: int, caregiver_username: str) -> User:
    """
    환자가 보호자에게 연결을 요청합니다 (Unpaired/Paired -> Requested).
    같은 보호자에게 다시 요청해도 오류가 아닙니다.
    이미 그 보호자와 연결된 상태라면 아무것도 바뀌지 않고 (Paired 유지),
    다른 보호자와 연결된 상태라면 기존 연결을 끊고 새 요청을 기록합니다.
    """
    caregiver = await _resolve_caregiver(db, caregiver_username)

    # 두 CASE 모두 UPDATE 이전 값 기준으로 평가됨
    already_paired = User.paired_caregiver_id == caregiver.id
    res = await db.execute(
        _patient_update(patient_id).values(
            pending_caregiver_request_id=case((already_paired, None), else_=caregiver.id),
            paired_caregiver_id=case((already_paired, User.paired_caregiver_id), else_=None),
        )
    )
    if res.rowcount != 1:
        await db.rollback()
        raise NotFoundError("patient not found")
    await db.commit()

    logger.info("Patient %s requested caregiver %s", patient_id, caregiver.id)
    return caregiver


async def accept_patient(db: AsyncSession, caregiver_id: int, patient_id: int) -> None:
    """
    보호자가 대기 중인 요청을 수락합니다 (Requested -> Paired).
    pending 값이 내 id일 때만 한 번의 UPDATE로 paired 설정 + pending 해제.
    """
    res = await db.execute(
        _patient_update(patient_id)
        .where(User.pending_caregiver_request_id == caregiver_id)
        .values(
            paired_caregiver_id=caregiver_id,
            pending_caregiver_request_id=None,
        )
    )
    if res.rowcount != 1:
        await db.rollback()
        logger.warning(
            "Caregiver %s tried to accept patient %s without a matching pending request",
            caregiver_id, patient_id,
        )
        raise InvalidRequestError("patient did not request this caregiver")
    await db.commit()

    logger.info("Caregiver %s accepted patient %s", caregiver_id, patient_id)


async def direct_assign(db: AsyncSession, patient_id: int, caregiver_username: str) -> User:
    """
    요청/수락 단계를 건너뛰고 바로 연결합니다 (구버전 /assign_caregiver 경로).
    """
    caregiver = await _resolve_caregiver(db, caregiver_username)

    res = await db.execute(
        _patient_update(patient_id).values(
            paired_caregiver_id=caregiver.id,
            pending_caregiver_request_id=None,
        )
    )
    if res.rowcount != 1:
        await db.rollback()
        raise NotFoundError("patient not found")
    await db.commit()

    logger.info("Patient %s directly assigned to caregiver %s", patient_id, caregiver.id)
    return caregiver


async def unassign_caregiver(db: AsyncSession, patient_id: int) -> None:
    """연결과 대기 중인 요청을 모두 해제합니다 (-> Unpaired)."""
    res = await db.execute(
        _patient_update(patient_id).values(
            paired_caregiver_id=None,
            pending_caregiver_request_id=None,
        )
    )
    if res.rowcount != 1:
        await db.rollback()
        raise NotFoundError("patient not found")
    await db.commit()

    logger.info("Patient %s is now unpaired", patient_id)


async def list_pending_patients(db: AsyncSession, caregiver_id: int) -> List[User]:
    q = (
        select(User)
        .where(User.role == PATIENT, User.pending_caregiver_request_id == caregiver_id)
        .order_by(User.id)
    )
    return list((await db.execute(q)).scalars().all())


async def list_assigned_patients(db: AsyncSession, caregiver_id: int) -> List[User]:
    q = (
        select(User)
        .where(User.role == PATIENT, User.paired_caregiver_id == caregiver_id)
        .order_by(User.id)
    )
    return list((await db.execute(q)).scalars().all())


async def get_caregiver_name(db: AsyncSession, patient_id: int) -> Optional[str]:
    caregiver = aliased(User)
    q = (
        select(caregiver.name)
        .select_from(User)
        .join(caregiver, User.paired_caregiver_id == caregiver.id)
        .where(User.id == patient_id, User.role == PATIENT)
    )
    row = (await db.execute(q)).first()
    if row is None:
        raise NotFoundError("no caregiver assigned")
    return row[0]


async def get_pairing_status(db: AsyncSession, patient_id: int) -> PairingState:
    patient = await user_directory.find_by_id(db, patient_id)
    if patient is None or patient.role != PATIENT:
        raise NotFoundError("patient not found")

    if patient.paired_caregiver_id is not None:
        state = PAIRED
    elif patient.pending_caregiver_request_id is not None:
        state = REQUESTED
    else:
        state = UNPAIRED
    return PairingState(
        state=state,
        paired_caregiver_id=patient.paired_caregiver_id,
        pending_caregiver_request_id=patient.pending_caregiver_request_id,
    )
