"""알림 관련 SQLAlchemy ORM 모델 정의.

Notification SQLAlchemy ORM model definitions.

Tables:
    - notifications: 근무 알림 (Shift reminders, one per user + attendance record)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shiftcare.database import Base


class Notification(Base):
    """알림 모델 — 다가오는 근무에 대한 리마인더.

    Notification model — Reminder for an upcoming shift.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 수신자 FK (Recipient user)
        attendance_id: 근태 기록 FK (Shift the reminder is about)
        message: 알림 메시지 (Human-readable message)
        is_read: 읽음 여부 (Whether the user has read this notification)
        created_at: 생성 일시 UTC (Creation timestamp)

    Constraints:
        uq_notification_user_attendance: 사용자+근무당 알림 1건
            (At most one notification per user and attendance record)
    """

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    attendance_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("attendance_records.id", ondelete="CASCADE"), nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    # 읽음 여부 — False=미읽음 (Unread by default)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "attendance_id", name="uq_notification_user_attendance"),
        Index("ix_notifications_user_read", "user_id", "is_read"),
    )
