from __future__ import annotations
from typing import Optional, Literal
import datetime as dt
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    프론트엔드는 camelCase(userId, caregiverUsername ...)로 주고받고,
    파이썬 쪽 필드는 snake_case로 둡니다.
    """
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


# --- 인증 ---
class UserCreate(CamelModel):
    """
    /register 요청 스키마.
    """
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1)
    role: Literal["patient", "caregiver"]


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    """
    /login 응답. token은 Authorization: Bearer 헤더에 그대로 넣어 사용합니다.
    """
    token: str
    token_type: str = "bearer"
    role: str
    user_id: int


class UserPublic(CamelModel):
    """
    비밀번호 해시 등 민감 정보를 제외한 사용자 정보.
    """
    id: int
    username: str
    name: Optional[str] = None
    role: str
    created_at: Optional[dt.datetime] = None


class RegisterResponse(BaseModel):
    message: str
    user: UserPublic


# --- 페어링 ---
class CaregiverRequest(CamelModel):
    # userId는 구버전 클라이언트 호환용. 보내면 로그인한 사용자와 같아야 합니다.
    user_id: Optional[int] = None
    caregiver_username: str = Field(..., min_length=1)


class DirectAssignRequest(CamelModel):
    caregiver_username: str = Field(..., min_length=1)


class CaregiverNameResponse(CamelModel):
    caregiver_name: Optional[str] = None


class AssignedPatient(CamelModel):
    id: int
    name: Optional[str] = None


class PairingStatus(CamelModel):
    state: Literal["unpaired", "requested", "paired"]
    paired_caregiver_id: Optional[int] = None
    pending_caregiver_request_id: Optional[int] = None


def _reject_null(value):
    # 수정 요청에서 생략은 "그대로 두기", 명시적인 null은 NOT NULL 컬럼이라 거부
    if value is None:
        raise ValueError("must not be null")
    return value


# --- 복약 ---
class MedicationCreate(CamelModel):
    name: str = Field(..., min_length=1)
    dosage: Optional[str] = None
    time: Optional[dt.time] = None  # "HH:MM"
    duration: Optional[str] = None
    is_taken: bool = False


class MedicationUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    dosage: Optional[str] = None
    time: Optional[dt.time] = None
    duration: Optional[str] = None
    is_taken: Optional[bool] = None

    @field_validator("name", "is_taken")
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)


class MedicationPublic(CamelModel):
    id: int
    user_id: int
    name: str
    dosage: Optional[str] = None
    time: Optional[dt.time] = None
    duration: Optional[str] = None
    is_taken: bool = False
    created_at: Optional[dt.datetime] = None


# --- 진료 예약 ---
class AppointmentCreate(CamelModel):
    title: str = Field(..., min_length=1)
    date: dt.date  # "YYYY-MM-DD"
    description: Optional[str] = None


class AppointmentUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    date: Optional[dt.date] = None
    description: Optional[str] = None

    @field_validator("title", "date")
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)


class AppointmentPublic(CamelModel):
    id: int
    user_id: int
    title: str
    date: dt.date
    description: Optional[str] = None
    created_at: Optional[dt.datetime] = None


# --- 일일 과제 ---
class DailyTaskCreate(CamelModel):
    name: str = Field(..., min_length=1)
    location: Optional[str] = None
    time: Optional[dt.time] = None
    frequency: Optional[str] = None


class DailyTaskUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    time: Optional[dt.time] = None
    frequency: Optional[str] = None

    @field_validator("name")
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)


class DailyTaskPublic(CamelModel):
    id: int
    user_id: int
    name: str
    location: Optional[str] = None
    time: Optional[dt.time] = None
    frequency: Optional[str] = None
    created_at: Optional[dt.datetime] = None


