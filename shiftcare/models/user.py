"""사용자 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definitions.
A single ``users`` table holds both admins and nurses/staff, separated by
``role``. Shift state is never derived from the flags here; the attendance
records are the source of truth.

Tables:
    - users: 사용자 계정 (Admin and staff accounts)
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiftcare.database import Base


class UserRole:
    """사용자 역할 값 (Role values stored in users.role)."""

    ADMIN = "admin"
    USER = "user"


class User(Base):
    """사용자 모델 — 관리자 및 간호사/직원 계정.

    User model — Admin and nurse/staff accounts.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        email: 로그인 이메일 (Login email, unique, lowercase)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        phone_number: 전화번호 (Phone number)
        date_of_birth: 생년월일 (Date of birth, optional)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        role: 역할 (Role: "admin" | "user")
        is_admitted: 관리자 승인 여부 (Admitted by an admin)
        is_active: 근무 중 플래그 (On-duty flag, set by start/close shift)
        ready_to_work: 근무 가능 플래그 (Ready-to-work flag, cleared on logout/close)
        current_attendance_id: 최근 근태 기록 약한 참조 (Weak reference to latest record)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 이메일 — 소문자로 저장 (stored lowercase, unique)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    # 비밀번호 해시 — 평문 저장 금지 (never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.USER)
    is_admitted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ready_to_work: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # FK 없는 약한 참조 — Weak reference, lookup hint only (no FK, no cascade)
    current_attendance_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    attendance_records = relationship("AttendanceRecord", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
