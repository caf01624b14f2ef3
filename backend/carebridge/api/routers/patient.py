from __future__ import annotations
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.db import get_db
from carebridge.errors import ForbiddenError
from carebridge.models import User
from carebridge.services import pairing
from carebridge.services.access_guard import get_current_patient
from carebridge.schemas import (
    CaregiverRequest, DirectAssignRequest, CaregiverNameResponse, MessageResponse, PairingStatus
)

# 경로가 /patients/... 와 구버전 /assign_caregiver 가 섞여 있어서 prefix 없음
router = APIRouter(tags=["patient"])


# [1] 보호자에게 연결 요청
@router.post("/patients/assign-caregiver", response_model=MessageResponse)
async def request_caregiver(
    req: CaregiverRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    patient_id = current_user.id
    # 구버전 클라이언트는 userId를 body에 같이 보냄. 다른 사람 id면 거부
    if req.user_id is not None and req.user_id != patient_id:
        raise ForbiddenError("cannot request a caregiver for another user")

    await pairing.request_caregiver(db, patient_id, req.caregiver_username)
    return {"message": "Caregiver request sent"}


# [2] 연결/요청 해제
@router.delete("/patients/caregiver", response_model=MessageResponse)
async def unassign_caregiver(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    await pairing.unassign_caregiver(db, current_user.id)
    return {"message": "Caregiver unassigned"}


# [3] 현재 페어링 상태
@router.get("/patients/pairing-status", response_model=PairingStatus)
async def get_pairing_status(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    state = await pairing.get_pairing_status(db, current_user.id)
    return PairingStatus(
        state=state.state,
        paired_caregiver_id=state.paired_caregiver_id,
        pending_caregiver_request_id=state.pending_caregiver_request_id,
    )


# [4] (구버전) 수락 절차 없이 바로 연결
@router.post("/assign_caregiver", response_model=MessageResponse)
async def direct_assign_caregiver(
    req: DirectAssignRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    await pairing.direct_assign(db, current_user.id, req.caregiver_username)
    return {"message": "Caregiver assigned successfully"}


# [5] 연결된 보호자 이름
@router.get("/get_caregiver", response_model=CaregiverNameResponse)
async def get_caregiver(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_patient),
):
    name = await pairing.get_caregiver_name(db, current_user.id)
    return CaregiverNameResponse(caregiver_name=name)
