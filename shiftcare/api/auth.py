"""공통 인증 라우터 — 회원가입, 로그인, 로그아웃, 프로필 조회.

Common Auth Router — Registration, login, logout, and profile endpoints.
Shared by both admin and app clients.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.api.deps import get_current_user
from shiftcare.database import get_db
from shiftcare.models.user import User
from shiftcare.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from shiftcare.schemas.notification import MessageResponse
from shiftcare.schemas.user import UserResponse
from shiftcare.services.auth_service import auth_service
from shiftcare.services.user_service import user_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """직원 회원가입 — 관리자 승인 전까지 근무 배정 불가.

    Staff self-registration. The account must be admitted by an admin
    before shifts can be assigned.
    """
    user: User = await auth_service.register(db, data)
    await db.commit()
    return user_service.to_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """로그인 — 액세스 토큰과 역할 반환.

    Login for admins and staff. Returns an access token and the role.
    """
    return await auth_service.login(db, data)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """로그아웃 — 근무 불가 상태로 표시.

    Logout endpoint. Marks the user as not ready to work.
    """
    await auth_service.logout(db, current_user.id)
    await db.commit()
    return {"message": "Logout successful. User is marked as unavailable for work."}


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """현재 사용자 프로필 조회.

    Get the profile of the currently authenticated user.
    """
    return user_service.to_response(current_user)
