"""관리자 API 테스트.

Admin API tests — Staff admission, location assignment, record listing,
working-time reports, the reminder sweep trigger and role enforcement.
Tests the admin-facing endpoints under /api/v1/admin/.
"""

import uuid
from datetime import datetime, timedelta, timezone
from io import BytesIO

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.models.attendance import AttendanceRecord, ShiftState
from shiftcare.models.user import User
from shiftcare.services.user_service import user_service
from tests.conftest import auth_header, make_user

ADMIN = "/api/v1/admin"
SITE = {"latitude": 37.5665, "longitude": 126.9780, "name": "Seoul General Ward 5"}


async def assign(client: AsyncClient, token: str, user: User, **extra):
    body = {"user_id": str(user.id), "location": SITE, **extra}
    return await client.post(f"{ADMIN}/attendances/assign", json=body, headers=auth_header(token))


# ===== Users =====

class TestAdminUsers:
    """직원 조회/승인 테스트."""

    async def test_list_users_excludes_admins(self, client: AsyncClient, admin_token, staff_user, pending_user):
        res = await client.get(f"{ADMIN}/users", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 2
        assert {u["email"] for u in data["items"]} == {"nurse@test.com", "pending@test.com"}

    async def test_filter_pending(self, client: AsyncClient, admin_token, staff_user, pending_user):
        """승인 대기 직원만 조회."""
        res = await client.get(f"{ADMIN}/users", params={"is_admitted": False}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert [u["email"] for u in res.json()["items"]] == ["pending@test.com"]

    async def test_pagination(self, client: AsyncClient, db: AsyncSession, admin_token):
        for i in range(5):
            await make_user(db, f"n{i}@test.com")
        res = await client.get(f"{ADMIN}/users", params={"page": 2, "per_page": 2}, headers=auth_header(admin_token))
        data = res.json()
        assert data["total"] == 5
        assert data["pages"] == 3
        assert len(data["items"]) == 2

    async def test_get_user(self, client: AsyncClient, admin_token, staff_user):
        res = await client.get(f"{ADMIN}/users/{staff_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["email"] == "nurse@test.com"

    async def test_get_unknown_user(self, client: AsyncClient, admin_token):
        res = await client.get(f"{ADMIN}/users/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_admit_user(self, client: AsyncClient, admin_token, pending_user):
        """직원 승인 — 본문 없이 호출하면 승인."""
        res = await client.patch(f"{ADMIN}/users/{pending_user.id}/admit", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["is_admitted"] is True

    async def test_revoke_admission(self, client: AsyncClient, admin_token, staff_user):
        res = await client.patch(
            f"{ADMIN}/users/{staff_user.id}/admit",
            json={"is_admitted": False},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        assert res.json()["is_admitted"] is False

    async def test_admit_admin_rejected(self, client: AsyncClient, admin_user, admin_token):
        res = await client.patch(f"{ADMIN}/users/{admin_user.id}/admit", headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_storage_failure_returns_internal_error(self, client: AsyncClient, admin_token, monkeypatch):
        """처리되지 않은 DB 오류는 500 InternalError 본문으로 응답."""

        async def _broken(db, **kwargs):
            raise SQLAlchemyError("connection reset")

        monkeypatch.setattr(user_service, "list_users", _broken)
        res = await client.get(f"{ADMIN}/users", headers=auth_header(admin_token))
        assert res.status_code == 500
        assert res.json() == {"detail": "Internal server error"}


# ===== Assignment =====

class TestAdminAssign:
    """근무 위치 배정 테스트."""

    async def test_assign_success(self, client: AsyncClient, admin_token, staff_user):
        tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).date()
        res = await assign(client, admin_token, staff_user, work_date=tomorrow.isoformat())
        assert res.status_code == 201
        data = res.json()
        assert data["shift_state"] == "assigned"
        assert data["presence_state"] == "absent"
        assert data["is_active"] is True
        assert data["location"] == SITE
        assert data["work_date"] == tomorrow.isoformat()
        assert data["start_time"] is None

    async def test_assign_sets_current_attendance(self, client: AsyncClient, admin_token, staff_user):
        res = await assign(client, admin_token, staff_user)
        user = await client.get(f"{ADMIN}/users/{staff_user.id}", headers=auth_header(admin_token))
        assert user.json()["current_attendance_id"] == res.json()["id"]

    async def test_duplicate_assignment_today(self, client: AsyncClient, admin_token, staff_user):
        """같은 날 두 번 배정하면 409."""
        assert (await assign(client, admin_token, staff_user)).status_code == 201
        res = await assign(client, admin_token, staff_user)
        assert res.status_code == 409

    async def test_reassign_supersedes_earlier_shift(
        self, client: AsyncClient, db: AsyncSession, admin_token, staff_user
    ):
        """이전 날짜의 열린 근무는 새 배정 시 superseded."""
        yesterday = datetime.now(timezone.utc) - timedelta(days=1)
        old = AttendanceRecord(
            user_id=staff_user.id,
            latitude=1.0,
            longitude=1.0,
            shift_state=ShiftState.ASSIGNED,
            created_at=yesterday,
            last_updated=yesterday,
        )
        db.add(old)
        await db.flush()

        res = await assign(client, admin_token, staff_user)
        assert res.status_code == 201

        listing = await client.get(
            f"{ADMIN}/attendances", params={"user_id": str(staff_user.id)}, headers=auth_header(admin_token)
        )
        states = sorted(r["shift_state"] for r in listing.json()["items"])
        assert states == ["assigned", "superseded"]

    async def test_assign_pending_user(self, client: AsyncClient, admin_token, pending_user):
        res = await assign(client, admin_token, pending_user)
        assert res.status_code == 400

    async def test_assign_unknown_user(self, client: AsyncClient, admin_token):
        ghost = User(id=uuid.uuid4())
        res = await assign(client, admin_token, ghost)
        assert res.status_code == 404

    async def test_assign_invalid_user_id(self, client: AsyncClient, admin_token):
        res = await client.post(
            f"{ADMIN}/attendances/assign",
            json={"user_id": "not-a-uuid", "location": SITE},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 400

    async def test_assign_missing_coordinates(self, client: AsyncClient, admin_token, staff_user):
        res = await client.post(
            f"{ADMIN}/attendances/assign",
            json={"user_id": str(staff_user.id), "location": {"name": "Nowhere"}},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 422

    async def test_admin_coordinates_must_come_in_pairs(self, client: AsyncClient, admin_token, staff_user):
        res = await assign(client, admin_token, staff_user, admin_latitude=37.5)
        assert res.status_code == 400

    async def test_admin_too_far_from_site(self, client: AsyncClient, admin_token, staff_user):
        """관리자 좌표에서 배정 반경을 넘으면 403."""
        res = await assign(client, admin_token, staff_user, admin_latitude=35.1796, admin_longitude=129.0756)
        assert res.status_code == 403
        detail = res.json()["detail"]
        assert detail["radius_km"] == 10
        assert detail["distance_km"] > 300

    async def test_admin_near_site(self, client: AsyncClient, admin_token, staff_user):
        res = await assign(client, admin_token, staff_user, admin_latitude=37.57, admin_longitude=126.98)
        assert res.status_code == 201


# ===== Attendance listing / active users / presence =====

class TestAdminAttendances:

    async def test_list_filters(self, client: AsyncClient, db: AsyncSession, admin_token, staff_user):
        other = await make_user(db, "other@test.com")
        await assign(client, admin_token, staff_user, work_date="2026-03-02")
        await assign(client, admin_token, other, work_date="2026-03-05")

        res = await client.get(
            f"{ADMIN}/attendances",
            params={"date_from": "2026-03-03", "shift_state": "assigned"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        items = res.json()["items"]
        assert [i["user_id"] for i in items] == [str(other.id)]
        assert "nurse_signature" not in items[0]

    async def test_list_unknown_state(self, client: AsyncClient, admin_token):
        res = await client.get(f"{ADMIN}/attendances", params={"shift_state": "paused"}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_active_users(self, client: AsyncClient, admin_token, staff_user, staff_token):
        await assign(client, admin_token, staff_user)
        res = await client.get(f"{ADMIN}/attendances/active-users", headers=auth_header(admin_token))
        assert res.json() == []

        await client.post(
            "/api/v1/app/my/attendance/start",
            json={"latitude": SITE["latitude"], "longitude": SITE["longitude"]},
            headers=auth_header(staff_token),
        )
        res = await client.get(f"{ADMIN}/attendances/active-users", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert len(data) == 1
        assert data[0]["email"] == "nurse@test.com"
        assert data[0]["attendance"]["shift_state"] == "in_progress"

    async def test_toggle_presence_creates_presence_record(self, client: AsyncClient, admin_token, staff_user):
        """기록이 없으면 출석 전용 기록 생성."""
        res = await client.post(f"{ADMIN}/attendances/{staff_user.id}/toggle-presence", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["presence_state"] == "present"
        assert data["shift_state"] is None

    async def test_toggle_presence_keeps_shift_state(self, client: AsyncClient, admin_token, staff_user):
        await assign(client, admin_token, staff_user)
        res = await client.post(f"{ADMIN}/attendances/{staff_user.id}/toggle-presence", headers=auth_header(admin_token))
        assert res.json()["presence_state"] == "present"
        assert res.json()["shift_state"] == "assigned"

        res = await client.post(f"{ADMIN}/attendances/{staff_user.id}/toggle-presence", headers=auth_header(admin_token))
        assert res.json()["presence_state"] == "absent"

    async def test_toggle_presence_unknown_user(self, client: AsyncClient, admin_token):
        res = await client.post(f"{ADMIN}/attendances/{uuid.uuid4()}/toggle-presence", headers=auth_header(admin_token))
        assert res.status_code == 404


# ===== Reports =====

class TestAdminReports:
    """근무시간 보고서 테스트."""

    @pytest.fixture
    async def completed(self, db: AsyncSession, staff_user):
        start = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)
        for offset, hours in ((0, 2), (5, 3)):
            db.add(AttendanceRecord(
                user_id=staff_user.id,
                location_name="Ward 3",
                latitude=10.0,
                longitude=20.0,
                shift_state=ShiftState.COMPLETED,
                start_time=start + timedelta(hours=offset),
                end_time=start + timedelta(hours=offset + hours),
                nurse_signature="sig",
                nurse_name="Nurse A",
            ))
        await db.flush()

    async def test_user_working_time(self, client: AsyncClient, admin_token, staff_user, completed):
        res = await client.get(f"{ADMIN}/reports/working-time/{staff_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["totalWorkingDays"] == 1
        day = data["workingDaysDetails"][0]
        assert day["date"] == "2026-03-02"
        assert day["totalWorkingTime"] == "5.00"
        assert len(day["activities"]) == 2

    async def test_unknown_user_report(self, client: AsyncClient, admin_token):
        res = await client.get(f"{ADMIN}/reports/working-time/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_all_users_working_time(self, client: AsyncClient, admin_token, completed):
        res = await client.get(f"{ADMIN}/reports/working-time", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["totalUsers"] == 1
        assert data["users"][0]["user"]["email"] == "nurse@test.com"

    async def test_export_excel(self, client: AsyncClient, admin_token, completed):
        """Excel 내보내기 — 파일 형식 및 시트 확인."""
        res = await client.get(f"{ADMIN}/reports/working-time/export", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "working_time_report.xlsx" in res.headers["content-disposition"]
        wb = load_workbook(BytesIO(res.content))
        assert wb.sheetnames == ["Activities", "Daily Totals"]


# ===== Reminder sweep =====

class TestAdminSweep:

    async def test_sweep_creates_reminder_once(self, client: AsyncClient, admin_token, staff_user, staff_token):
        today = datetime.now(timezone.utc).date()
        await assign(client, admin_token, staff_user, work_date=today.isoformat())

        res = await client.post(f"{ADMIN}/notifications/sweep", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json() == {"scanned": 1, "created": 1, "skipped": 0, "failed": 0}

        res = await client.post(f"{ADMIN}/notifications/sweep", headers=auth_header(admin_token))
        assert res.json()["created"] == 0
        assert res.json()["skipped"] == 1

        mine = await client.get("/api/v1/app/my/notifications", headers=auth_header(staff_token))
        items = mine.json()["items"]
        assert len(items) == 1
        assert items[0]["message"] == f"Reminder: You have work scheduled on {today.isoformat()}."
        assert items[0]["work_date"] == today.isoformat()


# ===== Role enforcement =====

class TestAdminRoles:
    """직원 토큰으로 관리자 API 호출 시 403."""

    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/users"),
            ("get", "/attendances"),
            ("get", "/attendances/active-users"),
            ("get", "/reports/working-time"),
            ("get", "/reports/working-time/export"),
            ("post", "/notifications/sweep"),
        ],
    )
    async def test_staff_forbidden(self, client: AsyncClient, staff_token, method, path):
        res = await client.request(method.upper(), f"{ADMIN}{path}", headers=auth_header(staff_token))
        assert res.status_code == 403

    async def test_staff_cannot_assign(self, client: AsyncClient, staff_user, staff_token):
        res = await assign(client, staff_token, staff_user)
        assert res.status_code == 403

    async def test_missing_token(self, client: AsyncClient):
        res = await client.get(f"{ADMIN}/users")
        assert res.status_code in (401, 403)
