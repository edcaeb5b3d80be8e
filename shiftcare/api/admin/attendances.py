"""관리자 근태 라우터 — 위치 배정 및 근태 기록 관리 API.

Admin Attendance Router — Location assignment, record listing, active
users and the legacy presence toggle.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.api.deps import require_admin
from shiftcare.database import get_db
from shiftcare.models.attendance import AttendanceRecord
from shiftcare.models.user import User
from shiftcare.schemas.attendance import (
    ActiveUserResponse,
    AssignLocationRequest,
    AttendanceResponse,
)
from shiftcare.services.shift_service import shift_service
from shiftcare.utils.exceptions import BadRequestError
from shiftcare.utils.pagination import Page, build_page

router: APIRouter = APIRouter()


@router.post("/assign", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
async def assign_location(
    data: AssignLocationRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """직원에게 근무 위치를 배정합니다.

    Assign a work location (and optional work date) to a staff user.
    Any other open shift of the user is superseded.

    Args:
        data: 배정 요청 데이터 (Assignment request data)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated admin)

    Returns:
        dict: 생성된 근태 기록 (Created attendance record)
    """
    try:
        user_id: UUID = UUID(data.user_id)
    except ValueError:
        raise BadRequestError("Invalid user id")

    if (data.admin_latitude is None) != (data.admin_longitude is None):
        raise BadRequestError("Both admin_latitude and admin_longitude are required for the radius check")
    admin_coords: tuple[float, float] | None = (
        (data.admin_latitude, data.admin_longitude) if data.admin_latitude is not None else None
    )

    record: AttendanceRecord = await shift_service.assign_location(
        db,
        user_id=user_id,
        location=data.location,
        work_date=data.work_date,
        admin_coords=admin_coords,
    )
    await db.commit()
    return shift_service.build_response(record)


@router.get("", response_model=Page)
async def list_attendances(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    user_id: Annotated[UUID | None, Query()] = None,
    shift_state: Annotated[str | None, Query()] = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> Page:
    """근태 기록 목록을 필터링하여 조회합니다.

    List attendance records with optional filters.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated admin)
        user_id: 사용자 UUID 필터, 선택 (Optional user filter)
        shift_state: 근무 상태 필터, 선택 (Optional shift state filter)
        date_from: 근무일 시작, 선택 (Optional work date lower bound)
        date_to: 근무일 종료, 선택 (Optional work date upper bound)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)
    """
    records, total = await shift_service.list_records(
        db,
        user_id=user_id,
        shift_state=shift_state,
        date_from=date_from,
        date_to=date_to,
        page=page,
        per_page=per_page,
    )
    items: list[dict] = [shift_service.build_response(r) for r in records]
    return build_page(items, total, page, per_page)


@router.get("/active-users", response_model=list[ActiveUserResponse])
async def list_active_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[dict]:
    """현재 근무 중인 직원 목록 (Users with a shift in progress)."""
    rows = await shift_service.list_active_users(db)
    return [
        {
            "user_id": str(user.id),
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
            "attendance": shift_service.build_response(record),
        }
        for user, record in rows
    ]


@router.post("/{user_id}/toggle-presence", response_model=AttendanceResponse)
async def toggle_presence(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """직원의 출석 상태를 토글합니다 (레거시).

    Legacy presence toggle. Flips presence on the user's newest record;
    the shift state is left untouched.
    """
    record: AttendanceRecord = await shift_service.toggle_presence(db, user_id)
    await db.commit()
    return shift_service.build_response(record)
