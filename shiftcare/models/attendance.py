"""근태 기록 SQLAlchemy ORM 모델 정의.

Attendance record SQLAlchemy ORM model definitions.
One row per shift attempt. Superseded shifts are retained (never deleted),
so the table is an append-only history per shift instance.

Shift state flow:
    assigned -> in_progress -> completed
    assigned | in_progress -> superseded   (forced, on reassignment)

Tables:
    - attendance_records: 근태/근무 기록 (Shift and presence records)
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Float, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiftcare.database import Base


class ShiftState:
    """근무 상태 값 (Values stored in attendance_records.shift_state).

    ``None`` marks a presence-only record created by the legacy presence toggle.
    """

    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SUPERSEDED = "superseded"

    OPEN: tuple[str, ...] = (ASSIGNED, IN_PROGRESS)
    ALL: tuple[str, ...] = (ASSIGNED, IN_PROGRESS, COMPLETED, SUPERSEDED)


class PresenceState:
    """출석 토글 상태 값 (Values stored in attendance_records.presence_state)."""

    PRESENT = "present"
    ABSENT = "absent"


# 열린 근무 조건 — partial unique index predicate (one open shift per user)
_OPEN_SHIFT_PREDICATE = text("shift_state IN ('assigned', 'in_progress')")


class AttendanceRecord(Base):
    """근태 기록 모델 — 근무 1회당 1건.

    Attendance record model — one row per shift attempt.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 사용자 FK (Owner user)
        location_name: 배정 장소 이름 (Assigned place name, optional)
        latitude: 배정 위도 (Assigned latitude)
        longitude: 배정 경도 (Assigned longitude)
        work_date: 근무 예정일 (Scheduled calendar date, optional)
        shift_state: 근무 상태 (Shift state, None for presence-only records)
        presence_state: 출석 토글 상태 (Legacy presence toggle state)
        start_time: 출근 시각 (Swipe-in timestamp)
        end_time: 퇴근 시각 (Swipe-out timestamp)
        start_latitude: 출근 위치 위도 (Swipe-in latitude)
        start_longitude: 출근 위치 경도 (Swipe-in longitude)
        nurse_signature: 감독 간호사 서명 (Supervising nurse signature, set at close)
        nurse_name: 감독 간호사 이름 (Supervising nurse name, set at close)
        last_updated: 마지막 상태 변경 (Last state change)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Constraints:
        uq_attendance_records_user_open: 사용자당 열린 근무 1건
            (At most one assigned/in_progress record per user)
    """

    __tablename__ = "attendance_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    location_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 배정 좌표 — 근무 기록에서는 필수, 출석 토글 전용 기록에서는 NULL
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    work_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    shift_state: Mapped[str | None] = mapped_column(String(20), nullable=True)
    presence_state: Mapped[str] = mapped_column(String(20), nullable=False, default=PresenceState.ABSENT)
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    start_latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    start_longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    # 서명 — base64 이미지 또는 텍스트 (base64 image or text signature)
    nurse_signature: Mapped[str | None] = mapped_column(Text, nullable=True)
    nurse_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_attendance_records_user", "user_id"),
        Index("ix_attendance_records_user_state", "user_id", "shift_state"),
        Index("ix_attendance_records_work_date", "work_date"),
        Index(
            "uq_attendance_records_user_open",
            "user_id",
            unique=True,
            postgresql_where=_OPEN_SHIFT_PREDICATE,
            sqlite_where=_OPEN_SHIFT_PREDICATE,
        ),
    )

    user = relationship("User", back_populates="attendance_records")

    @property
    def is_active(self) -> bool:
        """레거시 호환 플래그 — 열린 근무 여부 (Open shift, legacy boolean)."""
        return self.shift_state in ShiftState.OPEN

    @property
    def location(self) -> dict:
        """배정 위치 딕셔너리 (Assigned location as a dict)."""
        return {
            "name": self.location_name,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
