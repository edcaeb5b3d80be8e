"""관리자 보고서 라우터 — 근무시간 집계 및 Excel 내보내기.

Admin Report Router — Working-time summaries and Excel export.
Responses serialize in camelCase (``totalWorkingDays``, ...).
"""

from io import BytesIO
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.api.deps import require_admin
from shiftcare.database import get_db
from shiftcare.models.user import User
from shiftcare.schemas.report import AllUsersWorkingSummary, UserWorkingSummary
from shiftcare.services.report_service import report_service

router: APIRouter = APIRouter()


@router.get("/working-time", response_model=AllUsersWorkingSummary)
async def all_users_working_time(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> AllUsersWorkingSummary:
    """전체 직원 근무시간 요약 (All-users summary grouped by user, then day)."""
    return await report_service.summarize_all(db)


@router.get("/working-time/export")
async def export_working_time(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    user_id: Annotated[UUID | None, Query()] = None,
) -> StreamingResponse:
    """근무시간 보고서를 Excel 파일로 내보냅니다."""
    excel_bytes: bytes = await report_service.export_workbook(db, user_id=user_id)
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=working_time_report.xlsx"},
    )


@router.get("/working-time/{user_id}", response_model=UserWorkingSummary)
async def user_working_time(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserWorkingSummary:
    """직원 1명의 일별 근무시간 요약.

    Per-day working-time summary of one user.
    """
    return await report_service.summarize_user(db, user_id)
