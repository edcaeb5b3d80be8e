"""알림 관련 Pydantic 응답 스키마 정의.

Notification response schema definitions.
"""

from datetime import date, datetime

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    """알림 응답 스키마 — 참조 근무의 근무일 포함.

    Attributes:
        id: 알림 UUID (Notification identifier)
        user_id: 수신자 UUID (Recipient)
        attendance_id: 근태 기록 UUID (Referenced shift)
        message: 메시지 (Message)
        is_read: 읽음 여부 (Read flag)
        work_date: 근무일 (Work date of the referenced shift)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: str
    user_id: str
    attendance_id: str
    message: str
    is_read: bool
    work_date: date | None = None
    created_at: datetime


class UnreadCountResponse(BaseModel):
    unread_count: int


class SweepResponse(BaseModel):
    """알림 스윕 결과 (Result of one reminder sweep)."""

    scanned: int
    created: int
    skipped: int
    failed: int


class MessageResponse(BaseModel):
    """단순 메시지 응답 (Generic message response)."""

    message: str
