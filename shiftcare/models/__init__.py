"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every model with the metadata, which
Alembic and ``Database.create_all`` rely on.

Modules:
    user: 사용자 (Users: admins and staff)
    attendance: 근태 기록 (Attendance / shift records)
    notification: 알림 (Shift reminders)
"""

from shiftcare.models.user import User, UserRole
from shiftcare.models.attendance import AttendanceRecord, PresenceState, ShiftState
from shiftcare.models.notification import Notification

__all__ = [
    "User", "UserRole",
    "AttendanceRecord", "PresenceState", "ShiftState",
    "Notification",
]
