"""앱 API 라우터 패키지 — 모든 앱(직원용) 엔드포인트 통합.

App API Router package — Aggregates all app-facing (staff) endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - profile: 내 프로필 (My profile)
    - attendances: 내 근무 출퇴근 (My shift: current, start, close, history, summary)
    - notifications: 내 알림 (My notifications)
"""

from fastapi import APIRouter

from shiftcare.api.app.attendances import router as attendance_router
from shiftcare.api.app.notifications import router as notifications_router
from shiftcare.api.app.profile import router as profile_router

app_router: APIRouter = APIRouter()

# 프로필: /profile 엔드포인트 (GET my profile)
app_router.include_router(profile_router, tags=["App Profile"])
# 내 근태: /my/attendance 하위 (My attendance)
app_router.include_router(attendance_router, prefix="/my/attendance", tags=["My Attendance"])
app_router.include_router(notifications_router, prefix="/my/notifications", tags=["My Notifications"])
