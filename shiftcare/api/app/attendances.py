"""앱 근태 라우터 — 내 근무 출퇴근 API.

App Attendance Router — The user's own shift: current assignment, swipe
in (start), swipe out (close with nurse signature), history and summary.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.api.deps import require_user
from shiftcare.database import get_db
from shiftcare.models.attendance import AttendanceRecord
from shiftcare.models.user import User
from shiftcare.schemas.attendance import AttendanceResponse, CloseShiftRequest, StartWorkRequest
from shiftcare.schemas.report import UserWorkingSummary
from shiftcare.services.report_service import report_service
from shiftcare.services.shift_service import shift_service
from shiftcare.utils.pagination import Page, build_page

router: APIRouter = APIRouter()


@router.get("/current", response_model=AttendanceResponse)
async def get_current_shift(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_user)],
) -> dict:
    """현재 배정된(또는 진행 중인) 근무를 조회합니다.

    Get the user's open shift (assigned or in progress). 404 when none.
    """
    record: AttendanceRecord = await shift_service.get_current_shift(db, current_user.id)
    return shift_service.build_response(record)


@router.post("/start", response_model=AttendanceResponse)
async def start_work(
    data: StartWorkRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_user)],
) -> dict:
    """배정 위치 근처에서 출근합니다.

    Swipe in. Must be within the start radius of the assigned location;
    otherwise 403 with the measured distance.

    Args:
        data: 출근 요청 데이터 (Start request data)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 직원 (Authenticated staff user)

    Returns:
        dict: 진행 중 근태 기록 (In-progress attendance record)
    """
    record: AttendanceRecord = await shift_service.start_work(
        db,
        user_id=current_user.id,
        latitude=data.latitude,
        longitude=data.longitude,
        start_time=data.start_time,
    )
    await db.commit()
    return shift_service.build_response(record)


@router.post("/close", response_model=AttendanceResponse)
async def close_shift(
    data: CloseShiftRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_user)],
) -> dict:
    """감독 간호사 서명과 함께 퇴근합니다.

    Swipe out with the supervising nurse's signature and name.

    Args:
        data: 퇴근 요청 데이터 (Close request data)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 직원 (Authenticated staff user)

    Returns:
        dict: 완료된 근태 기록 (Completed attendance record)
    """
    record: AttendanceRecord = await shift_service.close_shift(
        db,
        user_id=current_user.id,
        nurse_signature=data.nurse_signature,
        nurse_name=data.nurse_name,
        end_time=data.end_time,
        latitude=data.latitude,
        longitude=data.longitude,
    )
    await db.commit()
    return shift_service.build_response(record)


@router.get("", response_model=Page)
async def list_my_attendances(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_user)],
    shift_state: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> Page:
    """내 근태 이력 (My attendance history, newest first)."""
    records, total = await shift_service.list_records(
        db,
        user_id=current_user.id,
        shift_state=shift_state,
        page=page,
        per_page=per_page,
    )
    items: list[dict] = [shift_service.build_response(r) for r in records]
    return build_page(items, total, page, per_page)


@router.get("/summary", response_model=UserWorkingSummary)
async def get_my_summary(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_user)],
) -> UserWorkingSummary:
    """내 일별 근무시간 요약 (My per-day working time)."""
    return await report_service.summarize_user(db, current_user.id)
