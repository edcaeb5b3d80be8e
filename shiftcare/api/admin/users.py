"""관리자 사용자 라우터 — 직원 조회 및 승인 API.

Admin User Router — Staff listing, detail and admission endpoints.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.api.deps import require_admin
from shiftcare.database import get_db
from shiftcare.models.user import User
from shiftcare.schemas.user import AdmitRequest, UserResponse
from shiftcare.services.user_service import user_service
from shiftcare.utils.pagination import Page, build_page

router: APIRouter = APIRouter()


@router.get("", response_model=Page)
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    is_admitted: Annotated[bool | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> Page:
    """직원 목록을 조회합니다.

    List staff users, optionally filtered by admission status.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated admin)
        is_admitted: 승인 여부 필터, 선택 (Optional admission filter)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)
    """
    users, total = await user_service.list_users(db, is_admitted=is_admitted, page=page, per_page=per_page)
    return build_page(users, total, page, per_page)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """사용자 상세 조회 (Get one user)."""
    return await user_service.get_user(db, user_id)


@router.patch("/{user_id}/admit", response_model=UserResponse)
async def admit_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    data: AdmitRequest | None = None,
) -> UserResponse:
    """직원을 승인(또는 승인 취소)합니다.

    Admit a staff user. Send ``{"is_admitted": false}`` to revoke.
    """
    is_admitted: bool = data.is_admitted if data is not None else True
    result: UserResponse = await user_service.set_admitted(db, user_id, is_admitted)
    await db.commit()
    return result
