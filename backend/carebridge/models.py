from __future__ import annotations
from typing import Optional, Literal
import datetime as dt

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    BigInteger, Integer, String, Text, Date, Time, DateTime, Boolean,
    CheckConstraint, ForeignKey, Index
)
from sqlalchemy.sql import func, false

from carebridge.db import Base

# SQLite는 INTEGER PRIMARY KEY만 자동 증가하므로 테스트 DB용 variant
BigIntPK = BigInteger().with_variant(Integer, "sqlite")

Role = Literal["patient", "caregiver"]
PATIENT = "patient"
CAREGIVER = "caregiver"


class User(Base):
    """
    환자/보호자 공용 사용자 테이블.
    페어링은 환자 -> 보호자 방향으로만 저장합니다 (보호자 행은 두 컬럼 모두 NULL).
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role in ('patient','caregiver')", name="ck_users_role"),
        Index("idx_users_paired_caregiver", "paired_caregiver_id"),
        Index("idx_users_pending_caregiver", "pending_caregiver_request_id"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String, nullable=False)

    # 수락 완료된 보호자
    paired_caregiver_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    # 환자가 요청했지만 아직 수락되지 않은 보호자
    pending_caregiver_request_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    medications: Mapped[list["Medication"]] = relationship(
        back_populates="owner", passive_deletes=True
    )
    appointments: Mapped[list["Appointment"]] = relationship(
        back_populates="owner", passive_deletes=True
    )
    daily_tasks: Mapped[list["DailyTask"]] = relationship(
        back_populates="owner", passive_deletes=True
    )


class Medication(Base):
    __tablename__ = "medications"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, index=True)
    # 항상 환자 id (보호자가 대신 추가해도 마찬가지)
    user_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    dosage: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    time: Mapped[Optional[dt.time]] = mapped_column(Time, nullable=True)
    duration: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_taken: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, server_default=false()
    )
    created_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    owner: Mapped["User"] = relationship(back_populates="medications")


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    owner: Mapped["User"] = relationship(back_populates="appointments")

    __table_args__ = (
        Index("idx_appointments_user_date", "user_id", "date"),
    )


class DailyTask(Base):
    __tablename__ = "daily_tasks"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    time: Mapped[Optional[dt.time]] = mapped_column(Time, nullable=True)
    frequency: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    owner: Mapped["User"] = relationship(back_populates="daily_tasks")
