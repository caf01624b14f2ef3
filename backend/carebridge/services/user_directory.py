from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy import select, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from carebridge.errors import AuthError, ConflictError
from carebridge.models import User
from carebridge.services.auth_service import hash_password, verify_password, dummy_verify

logger = logging.getLogger(__name__)


async def find_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)


async def find_by_username(db: AsyncSession, username: str) -> Optional[User]:
    q = select(User).where(User.username == username)
    res = await db.execute(q)
    return res.scalar_one_or_none()


async def find_by_username_and_role(db: AsyncSession, username: str, role: str) -> Optional[User]:
    q = select(User).where(User.username == username, User.role == role)
    res = await db.execute(q)
    return res.scalar_one_or_none()


async def create_user(db: AsyncSession, username: str, credential: str, name: str, role: str) -> User:
    """
    새 사용자를 만듭니다. 아이디 중복이면 ConflictError.
    평문 비밀번호는 저장하지 않습니다.
    """
    if await find_by_username(db, username):
        raise ConflictError("username already exists")

    try:
        res = await db.execute(
            insert(User)
            .values(
                username=username,
                password_hash=hash_password(credential),
                name=name,
                role=role,
            )
            .returning(User)
        )
        user = res.scalar_one()
        await db.commit()
    except IntegrityError:
        # 동시에 같은 아이디로 가입한 경우 unique 제약에서 걸림
        await db.rollback()
        raise ConflictError("username already exists")

    logger.info("Created %s user id=%s username=%s", role, user.id, username)
    return user


async def verify_credential(db: AsyncSession, username: str, credential: str) -> User:
    """
    아이디가 없을 때와 비밀번호가 틀릴 때를 구분하지 않고 같은 AuthError를 냅니다.
    """
    user = await find_by_username(db, username)
    if user is None:
        dummy_verify()
        raise AuthError("invalid_credentials")
    if not verify_password(credential, user.password_hash):
        raise AuthError("invalid_credentials")
    return user
