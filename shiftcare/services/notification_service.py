"""알림 서비스 — 알림 비즈니스 로직.

Notification Service — Business logic for notification management.
Handles listing, read/unread operations, and the shift reminder
auto-creation used by the reminder sweep.
"""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.models.attendance import AttendanceRecord
from shiftcare.models.notification import Notification
from shiftcare.repositories.notification_repository import notification_repository
from shiftcare.schemas.notification import NotificationResponse
from shiftcare.utils.exceptions import NotFoundError
from shiftcare.utils.time_utils import ensure_utc


def reminder_message(work_date: date) -> str:
    """근무 알림 메시지 (Reminder message for a scheduled shift)."""
    return f"Reminder: You have work scheduled on {work_date:%Y-%m-%d}."


class NotificationService:
    """알림 서비스.

    Notification service providing read/unread operations and reminder
    creation for scheduled shifts.
    """

    # --- 공통 조회/읽음 처리 (Shared read/unread operations) ---

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[NotificationResponse], int]:
        """사용자의 알림 목록을 페이지네이션하여 조회합니다.

        List paginated notifications for a user, newest first, each with
        the work date of the shift it refers to.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[list[NotificationResponse], int]: (알림 목록, 전체 개수)
                                    (Notification responses, total count)
        """
        rows, total = await notification_repository.get_user_notifications(db, user_id, page, per_page)
        items: list[NotificationResponse] = [self.build_response(n, work_date) for n, work_date in rows]
        return items, total

    async def get_unread_count(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """사용자의 읽지 않은 알림 수를 조회합니다.

        Get the count of unread notifications for a user.
        """
        return await notification_repository.get_unread_count(db, user_id)

    async def mark_read(
        self,
        db: AsyncSession,
        notification_id: UUID,
        user_id: UUID,
    ) -> None:
        """단일 알림을 읽음 처리합니다.

        Mark a single notification as read. Notifications of other users are
        treated as missing.

        Raises:
            NotFoundError: 알림이 없을 때 (Notification not found)
        """
        if not await notification_repository.mark_read(db, notification_id, user_id):
            raise NotFoundError("Notification not found")

    async def mark_all_read(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """사용자의 모든 읽지 않은 알림을 읽음 처리합니다.

        Returns:
            int: 읽음 처리된 알림 수 (Count of notifications marked as read)
        """
        return await notification_repository.mark_all_read(db, user_id)

    # --- 자동 생성 (Auto-creation) ---

    async def create_shift_reminder(
        self,
        db: AsyncSession,
        record: AttendanceRecord,
    ) -> Notification | None:
        """예정된 근무에 대한 알림을 생성합니다 — 이미 있으면 None.

        Create the reminder for a scheduled shift unless one already exists
        for the same (user, attendance) pair.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record: 근무 예정 기록, work_date 필수 (Scheduled record with a work date)

        Returns:
            Notification | None: 생성된 알림, 중복이면 None
                                 (Created notification, None when already reminded)
        """
        if await notification_repository.exists_for_attendance(db, record.user_id, record.id):
            return None
        return await notification_repository.create_notification(
            db,
            user_id=record.user_id,
            attendance_id=record.id,
            message=reminder_message(record.work_date),
        )

    @staticmethod
    def build_response(notification: Notification, work_date: date | None = None) -> NotificationResponse:
        """알림 응답 모델 구성 (Response model with the referenced work date)."""
        return NotificationResponse(
            id=str(notification.id),
            user_id=str(notification.user_id),
            attendance_id=str(notification.attendance_id),
            message=notification.message,
            is_read=notification.is_read,
            work_date=work_date,
            created_at=ensure_utc(notification.created_at),
        )


# 싱글턴 인스턴스
notification_service: NotificationService = NotificationService()
