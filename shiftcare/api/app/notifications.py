"""앱 알림 라우터 — 내 알림 API.

App Notification Router — The user's shift reminders: list, unread
count, mark read and mark all read.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.api.deps import require_user
from shiftcare.database import get_db
from shiftcare.models.user import User
from shiftcare.schemas.notification import MessageResponse, UnreadCountResponse
from shiftcare.services.notification_service import notification_service
from shiftcare.utils.pagination import Page, build_page

router: APIRouter = APIRouter()


@router.get("", response_model=Page)
async def list_my_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_user)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> Page:
    """내 알림 목록을 조회합니다.

    List my notifications, newest first.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 직원 (Authenticated staff user)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)
    """
    items, total = await notification_service.list_notifications(
        db, user_id=current_user.id, page=page, per_page=per_page
    )
    return build_page(items, total, page, per_page)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_user)],
) -> dict:
    count: int = await notification_service.get_unread_count(db, user_id=current_user.id)
    return {"unread_count": count}


@router.patch("/read-all", response_model=MessageResponse)
async def mark_all_read(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_user)],
) -> dict:
    """모든 읽지 않은 알림을 읽음 처리합니다.

    Mark all unread notifications as read.
    """
    count: int = await notification_service.mark_all_read(db, user_id=current_user.id)
    await db.commit()
    return {"message": f"{count} notifications marked as read"}


@router.patch("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_user)],
) -> dict:
    """단일 알림을 읽음 처리합니다.

    Mark a single notification as read. 404 for someone else's notification.
    """
    await notification_service.mark_read(db, notification_id=notification_id, user_id=current_user.id)
    await db.commit()
    return {"message": "Notification marked as read"}
