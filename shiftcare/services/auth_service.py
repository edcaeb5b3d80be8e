"""인증 서비스 — 로그인, 회원가입, 로그아웃 비즈니스 로직.

Auth Service — Business logic for login, registration, and logout.
Admins and staff share one login; the role in the token decides which
router family (admin/app) accepts it.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.models.user import User, UserRole
from shiftcare.repositories.user_repository import user_repository
from shiftcare.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from shiftcare.utils.exceptions import ConflictError, NotFoundError, UnauthorizedError
from shiftcare.utils.jwt import create_access_token
from shiftcare.utils.password import hash_password, verify_password


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        return {"sub": str(user.id), "role": user.role}

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> User:
        """직원 회원가입을 처리합니다 — 승인 전 상태로 생성.

        Process staff self-registration. The account starts un-admitted.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Registration request data)

        Returns:
            User: 생성된 사용자 (Created user)

        Raises:
            ConflictError: 같은 이메일이 이미 존재할 때 (Email already registered)
        """
        email: str = data.email.strip().lower()
        if await user_repository.get_by_email(db, email) is not None:
            raise ConflictError("Email is already registered")

        return await user_repository.create(
            db,
            {
                "email": email,
                "first_name": data.first_name,
                "last_name": data.last_name,
                "phone_number": data.phone_number,
                "date_of_birth": data.date_of_birth,
                "password_hash": hash_password(data.password),
                "role": UserRole.USER,
                "is_admitted": False,
            },
        )

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """로그인을 처리합니다.

        Raises:
            UnauthorizedError: 잘못된 인증 정보일 때 (Invalid credentials)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")

        access_token: str = create_access_token(self._build_jwt_payload(user))
        return TokenResponse(access_token=access_token, user_id=str(user.id), role=user.role)

    async def logout(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> None:
        """로그아웃 처리 — 근무 불가 상태로 표시합니다.

        Mark the user as not ready to work. Tokens are stateless and simply
        expire.
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.ready_to_work = False
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
