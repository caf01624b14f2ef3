from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.config import Settings
from carebridge.db import get_db
from carebridge.models import User
from carebridge.services import user_directory
from carebridge.services.auth_service import create_access_token, get_current_user, get_settings_dep
from carebridge.schemas import UserCreate, LoginRequest, LoginResponse, UserPublic, RegisterResponse

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    # 아이디 중복이면 user_directory에서 ConflictError(409)
    user = await user_directory.create_user(
        db,
        username=user_in.username,
        credential=user_in.password,
        name=user_in.name,
        role=user_in.role,
    )
    return RegisterResponse(message="User registered successfully", user=UserPublic.model_validate(user))


@router.post("/login", response_model=LoginResponse)
async def login_for_access_token(
    form: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    # 아이디가 없든 비밀번호가 틀리든 같은 401
    user = await user_directory.verify_credential(db, form.username, form.password)

    access_token = create_access_token(
        settings, data={"sub": str(user.id), "role": user.role}
    )
    return LoginResponse(token=access_token, role=user.role, user_id=user.id)


@router.get("/me", response_model=UserPublic)
async def get_my_info(current_user: User = Depends(get_current_user)):
    """
    현재 인증된 사용자 정보 (JWT 토큰 기반)를 반환합니다.
    """
    return current_user
