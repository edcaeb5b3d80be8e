"""사용자 서비스 — 사용자 조회 및 승인 비즈니스 로직.

User Service — Business logic for listing users and admitting staff.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.models.user import User, UserRole
from shiftcare.repositories.user_repository import user_repository
from shiftcare.schemas.user import UserResponse
from shiftcare.utils.exceptions import BadRequestError, NotFoundError


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user business logic.
    """

    def to_response(self, user: User) -> UserResponse:
        """사용자 모델을 응답 스키마로 변환합니다.

        Convert a User model instance to a UserResponse schema.
        """
        return UserResponse(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            phone_number=user.phone_number,
            date_of_birth=user.date_of_birth,
            role=user.role,
            is_admitted=user.is_admitted,
            is_active=user.is_active,
            ready_to_work=user.ready_to_work,
            current_attendance_id=str(user.current_attendance_id) if user.current_attendance_id else None,
            created_at=user.created_at,
        )

    async def list_users(
        self,
        db: AsyncSession,
        is_admitted: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[UserResponse], int]:
        """직원 목록을 조회합니다 (관리자 제외).

        List staff users, optionally filtered by admission.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            is_admitted: 승인 여부 필터 (Optional admission filter)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[list[UserResponse], int]: (사용자 목록, 전체 개수)
        """
        users, total = await user_repository.list_users(
            db, role=UserRole.USER, is_admitted=is_admitted, page=page, per_page=per_page
        )
        return [self.to_response(u) for u in users], total

    async def get_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> UserResponse:
        """사용자 상세 정보를 조회합니다.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return self.to_response(user)

    async def set_admitted(
        self,
        db: AsyncSession,
        user_id: UUID,
        is_admitted: bool = True,
    ) -> UserResponse:
        """직원의 승인 상태를 변경합니다.

        Admit (or revoke admission of) a staff user. Only admitted users can
        be assigned shifts.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
            BadRequestError: 관리자 계정일 때 (Target is an admin account)
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if user.is_admin:
            raise BadRequestError("Admin accounts do not require admission")

        user = await user_repository.update(db, user, {"is_admitted": is_admitted})
        return self.to_response(user)


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
