"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - users: 직원 조회 및 승인 (Staff listing and admission)
    - attendances: 위치 배정 및 근태 기록 (Assignment and attendance records)
    - reports: 근무시간 보고서 (Working-time reports)
    - notifications: 알림 스윕 (Reminder sweep trigger)
"""

from fastapi import APIRouter

from shiftcare.api.admin.attendances import router as attendances_router
from shiftcare.api.admin.notifications import router as notifications_router
from shiftcare.api.admin.reports import router as reports_router
from shiftcare.api.admin.users import router as users_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(users_router, prefix="/users", tags=["Users"])
# 근태: /attendances 하위 (Attendance records)
admin_router.include_router(attendances_router, prefix="/attendances", tags=["Attendances"])
admin_router.include_router(reports_router, prefix="/reports", tags=["Reports"])
admin_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
