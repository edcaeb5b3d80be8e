"""관리자 알림 라우터 — 근무 알림 스윕 수동 실행.

Admin Notification Router — Manual trigger of the reminder sweep.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from shiftcare.api.deps import require_admin
from shiftcare.models.user import User
from shiftcare.schemas.notification import SweepResponse
from shiftcare.services.reminder_scheduler import SweepResult, run_reminder_sweep

router: APIRouter = APIRouter()


@router.post("/sweep", response_model=SweepResponse)
async def run_sweep(
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """근무 알림 스윕을 즉시 1회 실행합니다.

    Run one reminder sweep now. The sweep uses its own sessions, one per
    candidate shift, so it does not share the request transaction.
    """
    result: SweepResult = await run_reminder_sweep(request.app.state.database.session_factory)
    return {
        "scanned": result.scanned,
        "created": result.created,
        "skipped": result.skipped,
        "failed": result.failed,
    }
