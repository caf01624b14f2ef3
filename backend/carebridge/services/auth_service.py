from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.config import Settings
from carebridge.db import get_db
from carebridge.errors import AuthError
from carebridge.models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)  # 헤더가 없을 때 AuthError로 직접 처리


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: Optional[str] = None


def hash_password(credential: str) -> str:
    # DB에는 단방향 해시만 저장
    return pwd_context.hash(credential)


def verify_password(credential: str, stored_hash: str) -> bool:
    return pwd_context.verify(credential, stored_hash)


def dummy_verify() -> None:
    # 없는 아이디로 로그인해도 해시 비교 한 번만큼 시간을 씀
    pwd_context.dummy_verify()


def create_access_token(settings: Settings, data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    data(sub=사용자 id, role)에 만료 시각 exp를 붙여 서명합니다.
    expires_delta가 없으면 설정값(기본 7일)을 사용합니다.
    """
    lifetime = expires_delta if expires_delta is not None else timedelta(
        minutes=settings.access_token_expire_minutes
    )
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def verify_access_token(settings: Settings, token: Optional[str]) -> Union[Identity, AuthError]:
    """
    토큰을 검증해서 Identity 또는 AuthError를 *반환*합니다 (raise 하지 않음).
    서명 오류, 만료, sub 누락 모두 AuthError.
    """
    if not token:
        return AuthError("missing_token")
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        return AuthError("token_expired")
    except JWTError:
        return AuthError("invalid_token")

    user_id_str = payload.get("sub")
    if user_id_str is None:
        return AuthError("invalid_token")
    try:
        user_id = int(user_id_str)
    except (TypeError, ValueError):
        return AuthError("invalid_token")
    return Identity(user_id=user_id, role=payload.get("role"))


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings_dep),
) -> Identity:
    """DB를 건드리기 전에 토큰만으로 인증 여부를 판단합니다."""
    token = credentials.credentials if credentials else None
    result = verify_access_token(settings, token)
    if isinstance(result, AuthError):
        logger.info("Rejected bearer token: %s", result.message)
        raise result
    return result


async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    API 요청 헤더의 토큰을 검증하고 DB에서 현재 사용자를 찾아 반환하는 의존성.
    토큰은 유효하지만 사용자가 삭제된 경우도 AuthError.
    """
    user = await db.get(User, identity.user_id)
    if user is None:
        raise AuthError("invalid_token")
    return user
