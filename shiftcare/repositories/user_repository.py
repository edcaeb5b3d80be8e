"""사용자 레포지토리 — 사용자 관련 DB 쿼리 담당.

User Repository — Handles user-related database queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.models.attendance import AttendanceRecord, ShiftState
from shiftcare.models.user import User, UserRole
from shiftcare.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 레포지토리.

    Extends:
        BaseRepository[User]
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다 (대소문자 무시).

        Retrieve a user by email. Emails are stored lowercase.
        """
        result = await db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def get_for_update(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> User | None:
        """사용자 행을 잠금과 함께 조회합니다.

        Retrieve a user row with ``SELECT ... FOR UPDATE``. Lifecycle
        operations take this lock first so concurrent assign/start calls for
        the same user serialize. SQLite ignores the lock clause.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)

        Returns:
            User | None: 잠긴 사용자 또는 None (Locked user or None)
        """
        result = await db.execute(
            select(User).where(User.id == user_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def list_users(
        self,
        db: AsyncSession,
        role: str | None = UserRole.USER,
        is_admitted: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[User], int]:
        """사용자 목록을 페이지네이션하여 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            role: 역할 필터, None이면 전체 (Role filter, None for all)
            is_admitted: 승인 여부 필터, 선택 (Optional admission filter)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[User], int]: (사용자 목록, 전체 개수)
        """
        query: Select = select(User)
        if role is not None:
            query = query.where(User.role == role)
        if is_admitted is not None:
            query = query.where(User.is_admitted == is_admitted)
        query = query.order_by(User.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def list_with_shift_in_progress(
        self,
        db: AsyncSession,
    ) -> Sequence[tuple[User, AttendanceRecord]]:
        """근무 중인 사용자와 해당 근태 기록을 조회합니다.

        Retrieve (user, record) pairs for every user whose shift is in progress.
        """
        query: Select = (
            select(User, AttendanceRecord)
            .join(AttendanceRecord, AttendanceRecord.user_id == User.id)
            .where(AttendanceRecord.shift_state == ShiftState.IN_PROGRESS)
            .order_by(AttendanceRecord.start_time.desc())
        )
        result = await db.execute(query)
        return result.all()

    async def get_by_ids(
        self,
        db: AsyncSession,
        user_ids: set[UUID],
    ) -> dict[UUID, User]:
        """여러 사용자를 ID로 조회하여 딕셔너리로 반환합니다."""
        if not user_ids:
            return {}
        result = await db.execute(select(User).where(User.id.in_(user_ids)))
        return {user.id: user for user in result.scalars().all()}


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
