"""알림 레포지토리 — 알림 관련 DB 쿼리 담당.

Notification Repository — Handles all notification-related database queries.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.models.attendance import AttendanceRecord
from shiftcare.models.notification import Notification
from shiftcare.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """알림 레포지토리.

    Extends:
        BaseRepository[Notification]
    """

    def __init__(self) -> None:
        super().__init__(Notification)

    async def exists_for_attendance(
        self,
        db: AsyncSession,
        user_id: UUID,
        attendance_id: UUID,
    ) -> bool:
        """사용자+근무 조합의 알림이 이미 있는지 확인합니다."""
        return await self.exists(db, {"user_id": user_id, "attendance_id": attendance_id})

    async def get_user_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[tuple[Notification, date | None]], int]:
        """사용자의 알림 목록을 근무일과 함께 페이지네이션하여 조회합니다.

        Retrieve paginated notifications for a user, each paired with the
        work date of the referenced attendance record.

        Returns:
            tuple[Sequence[tuple[Notification, date | None]], int]:
                ((알림, 근무일) 목록, 전체 개수)
        """
        base: Select = select(Notification).where(Notification.user_id == user_id)
        total: int = (
            await db.execute(select(func.count()).select_from(base.subquery()))
        ).scalar() or 0

        query: Select = (
            select(Notification, AttendanceRecord.work_date)
            .outerjoin(AttendanceRecord, AttendanceRecord.id == Notification.attendance_id)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await db.execute(query)
        return result.all(), total

    async def get_unread_count(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """사용자의 읽지 않은 알림 수를 조회합니다."""
        query: Select = (
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
        return (await db.execute(query)).scalar() or 0

    async def mark_read(
        self,
        db: AsyncSession,
        notification_id: UUID,
        user_id: UUID,
    ) -> bool:
        """단일 알림을 읽음 처리합니다.

        Returns:
            bool: 처리 성공 여부 — 본인 알림이 아니면 False
                  (False when the notification does not belong to the user)
        """
        result = await db.execute(
            update(Notification)
            .where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
            .values(is_read=True)
        )
        await db.flush()
        return result.rowcount > 0

    async def mark_all_read(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """사용자의 모든 읽지 않은 알림을 읽음 처리합니다."""
        result = await db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True)
        )
        await db.flush()
        return result.rowcount

    async def create_notification(
        self,
        db: AsyncSession,
        user_id: UUID,
        attendance_id: UUID,
        message: str,
    ) -> Notification:
        """새 알림을 생성합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 수신자 UUID (Recipient user UUID)
            attendance_id: 근태 기록 UUID (Referenced attendance record)
            message: 알림 메시지 (Notification message)

        Returns:
            Notification: 생성된 알림 (Created notification)
        """
        notification: Notification = Notification(
            user_id=user_id,
            attendance_id=attendance_id,
            message=message,
        )
        db.add(notification)
        await db.flush()
        await db.refresh(notification)
        return notification


# 싱글턴 인스턴스 — Singleton instance
notification_repository: NotificationRepository = NotificationRepository()
