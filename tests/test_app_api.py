"""앱(직원) 전용 API 테스트.

App (staff) API tests — Profile, the shift flow (current, start, close),
history, working-time summary and notifications.
Tests the staff-facing endpoints under /api/v1/app/.
"""

import uuid

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.models.attendance import AttendanceRecord, ShiftState
from shiftcare.models.notification import Notification
from shiftcare.services.shift_service import shift_service
from tests.conftest import auth_header, make_user

APP = "/api/v1/app"
SHIFT = f"{APP}/my/attendance"
SITE = {"latitude": 37.5665, "longitude": 126.9780, "name": "Seoul General Ward 5"}
# 약 1km 북쪽 (About 1 km north of the site)
FAR = {"latitude": 37.5755, "longitude": 126.9780}

START = "2026-03-02T08:00:00+00:00"
END = "2026-03-02T10:30:00+00:00"
CLOSE_BODY = {"nurse_signature": "data:image/png;base64,iVBORw0KGgo=", "nurse_name": "Head Nurse Kim"}


@pytest_asyncio.fixture
async def assigned(db: AsyncSession, staff_user) -> AttendanceRecord:
    """스태프에게 위치 배정."""
    return await shift_service.assign_location(db, staff_user.id, SITE)


async def start(client: AsyncClient, token: str, coords: dict = SITE, **extra):
    body = {"latitude": coords["latitude"], "longitude": coords["longitude"], **extra}
    return await client.post(f"{SHIFT}/start", json=body, headers=auth_header(token))


# ===== Profile =====

class TestAppProfile:
    """직원 프로필 테스트."""

    async def test_get_profile(self, client: AsyncClient, staff_token):
        """내 프로필 조회."""
        res = await client.get(f"{APP}/profile", headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["email"] == "nurse@test.com"
        assert data["is_active"] is False
        assert data["ready_to_work"] is False

    async def test_admin_token_rejected(self, client: AsyncClient, admin_token):
        """관리자 토큰으로 앱 API 호출 시 403."""
        res = await client.get(f"{APP}/profile", headers=auth_header(admin_token))
        assert res.status_code == 403


# ===== Current shift =====

class TestCurrentShift:

    async def test_no_assignment(self, client: AsyncClient, staff_token):
        res = await client.get(f"{SHIFT}/current", headers=auth_header(staff_token))
        assert res.status_code == 404

    async def test_current_assignment(self, client: AsyncClient, staff_token, assigned):
        res = await client.get(f"{SHIFT}/current", headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["id"] == str(assigned.id)
        assert data["shift_state"] == "assigned"
        assert data["location"] == SITE


# ===== Start work =====

class TestStartWork:
    """출근(스와이프 인) 테스트."""

    async def test_start_at_site(self, client: AsyncClient, staff_token, assigned):
        res = await start(client, staff_token, start_time=START)
        assert res.status_code == 200
        data = res.json()
        assert data["shift_state"] == "in_progress"
        assert data["start_time"].startswith("2026-03-02T08:00:00")
        assert data["end_time"] is None

    async def test_start_marks_user_on_duty(self, client: AsyncClient, staff_token, assigned):
        await start(client, staff_token)
        profile = (await client.get(f"{APP}/profile", headers=auth_header(staff_token))).json()
        assert profile["is_active"] is True
        assert profile["ready_to_work"] is True
        assert profile["current_attendance_id"] == str(assigned.id)

    async def test_start_too_far(self, client: AsyncClient, staff_token, assigned):
        """반경 500m 밖에서 출근하면 403과 거리 정보."""
        res = await start(client, staff_token, coords=FAR)
        assert res.status_code == 403
        detail = res.json()["detail"]
        assert "500m" in detail["message"]
        assert detail["radius_km"] == 0.5
        assert 0.9 < detail["distance_km"] < 1.1
        assert detail["assigned_location"] == SITE

        current = (await client.get(f"{SHIFT}/current", headers=auth_header(staff_token))).json()
        assert current["shift_state"] == "assigned"

    async def test_start_without_assignment(self, client: AsyncClient, staff_token):
        res = await start(client, staff_token)
        assert res.status_code == 404

    async def test_start_twice(self, client: AsyncClient, staff_token, assigned):
        assert (await start(client, staff_token)).status_code == 200
        res = await start(client, staff_token)
        assert res.status_code == 409

    async def test_start_invalid_coordinates(self, client: AsyncClient, staff_token, assigned):
        res = await client.post(
            f"{SHIFT}/start", json={"latitude": 91, "longitude": 0}, headers=auth_header(staff_token)
        )
        assert res.status_code == 422

    async def test_start_invalid_time(self, client: AsyncClient, staff_token, assigned):
        res = await start(client, staff_token, start_time="yesterday-ish")
        assert res.status_code == 400


# ===== Close shift =====

class TestCloseShift:
    """퇴근(스와이프 아웃) 테스트."""

    async def test_close_with_signature(self, client: AsyncClient, staff_token, assigned):
        await start(client, staff_token, start_time=START)
        res = await client.post(
            f"{SHIFT}/close", json={**CLOSE_BODY, "end_time": END}, headers=auth_header(staff_token)
        )
        assert res.status_code == 200
        data = res.json()
        assert data["shift_state"] == "completed"
        assert data["is_active"] is False
        assert data["nurse_name"] == "Head Nurse Kim"
        assert data["has_signature"] is True
        assert "nurse_signature" not in data

    async def test_close_clears_duty_flags(self, client: AsyncClient, staff_token, assigned):
        await start(client, staff_token, start_time=START)
        await client.post(f"{SHIFT}/close", json={**CLOSE_BODY, "end_time": END}, headers=auth_header(staff_token))

        profile = (await client.get(f"{APP}/profile", headers=auth_header(staff_token))).json()
        assert profile["is_active"] is False
        assert profile["ready_to_work"] is False

    async def test_close_before_start(self, client: AsyncClient, staff_token, assigned):
        res = await client.post(f"{SHIFT}/close", json=CLOSE_BODY, headers=auth_header(staff_token))
        assert res.status_code == 409

    async def test_close_twice(self, client: AsyncClient, staff_token, assigned):
        await start(client, staff_token, start_time=START)
        await client.post(f"{SHIFT}/close", json={**CLOSE_BODY, "end_time": END}, headers=auth_header(staff_token))
        res = await client.post(f"{SHIFT}/close", json={**CLOSE_BODY, "end_time": END}, headers=auth_header(staff_token))
        assert res.status_code == 409

    async def test_close_without_signature(self, client: AsyncClient, staff_token, assigned):
        await start(client, staff_token, start_time=START)
        res = await client.post(
            f"{SHIFT}/close", json={"nurse_signature": "", "nurse_name": "Kim"}, headers=auth_header(staff_token)
        )
        assert res.status_code == 422

    async def test_close_blank_signature(self, client: AsyncClient, staff_token, assigned):
        await start(client, staff_token, start_time=START)
        res = await client.post(
            f"{SHIFT}/close", json={"nurse_signature": "   ", "nurse_name": "Kim"}, headers=auth_header(staff_token)
        )
        assert res.status_code == 400

    async def test_close_end_before_start(self, client: AsyncClient, staff_token, assigned):
        await start(client, staff_token, start_time=START)
        res = await client.post(
            f"{SHIFT}/close",
            json={**CLOSE_BODY, "end_time": "2026-03-02T07:00:00+00:00"},
            headers=auth_header(staff_token),
        )
        assert res.status_code == 400

    async def test_close_away_from_start(self, client: AsyncClient, staff_token, assigned):
        await start(client, staff_token, start_time=START)
        res = await client.post(
            f"{SHIFT}/close", json={**CLOSE_BODY, "end_time": END, **FAR}, headers=auth_header(staff_token)
        )
        assert res.status_code == 403
        assert res.json()["detail"]["radius_km"] == 0.5


# ===== History / summary =====

class TestHistoryAndSummary:

    async def test_history_only_mine(self, client: AsyncClient, db: AsyncSession, staff_token, assigned):
        other = await make_user(db, "other@test.com")
        await shift_service.assign_location(db, other.id, SITE)

        res = await client.get(SHIFT, headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == str(assigned.id)

    async def test_history_state_filter(self, client: AsyncClient, staff_token, assigned):
        res = await client.get(SHIFT, params={"shift_state": "completed"}, headers=auth_header(staff_token))
        assert res.json()["total"] == 0

    async def test_summary_after_completed_shift(self, client: AsyncClient, staff_token, assigned):
        """2시간 30분 근무 → 2.50."""
        await start(client, staff_token, start_time=START)
        await client.post(f"{SHIFT}/close", json={**CLOSE_BODY, "end_time": END}, headers=auth_header(staff_token))

        res = await client.get(f"{SHIFT}/summary", headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["totalWorkingDays"] == 1
        assert data["workingDaysDetails"][0]["date"] == "2026-03-02"
        assert data["workingDaysDetails"][0]["totalWorkingTime"] == "2.50"


# ===== Notifications =====

class TestAppNotifications:
    """직원 알림 테스트."""

    @pytest_asyncio.fixture
    async def reminders(self, db: AsyncSession, staff_user, assigned) -> list[Notification]:
        other = await make_user(db, "other@test.com")
        other_shift = await shift_service.assign_location(db, other.id, SITE)
        items = [
            Notification(user_id=staff_user.id, attendance_id=assigned.id, message="Reminder A"),
            Notification(user_id=other.id, attendance_id=other_shift.id, message="Reminder B"),
        ]
        db.add_all(items)
        await db.flush()
        return items

    async def test_list_only_mine(self, client: AsyncClient, staff_token, reminders):
        res = await client.get(f"{APP}/my/notifications", headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 1
        assert data["items"][0]["message"] == "Reminder A"
        assert data["items"][0]["is_read"] is False

    async def test_unread_count_and_mark_read(self, client: AsyncClient, staff_token, reminders):
        res = await client.get(f"{APP}/my/notifications/unread-count", headers=auth_header(staff_token))
        assert res.json() == {"unread_count": 1}

        res = await client.patch(
            f"{APP}/my/notifications/{reminders[0].id}/read", headers=auth_header(staff_token)
        )
        assert res.status_code == 200
        assert res.json()["message"] == "Notification marked as read"

        res = await client.get(f"{APP}/my/notifications/unread-count", headers=auth_header(staff_token))
        assert res.json() == {"unread_count": 0}

    async def test_cannot_read_others(self, client: AsyncClient, staff_token, reminders):
        """다른 사용자의 알림은 404."""
        res = await client.patch(
            f"{APP}/my/notifications/{reminders[1].id}/read", headers=auth_header(staff_token)
        )
        assert res.status_code == 404

    async def test_unknown_notification(self, client: AsyncClient, staff_token):
        res = await client.patch(f"{APP}/my/notifications/{uuid.uuid4()}/read", headers=auth_header(staff_token))
        assert res.status_code == 404

    async def test_mark_all_read(self, client: AsyncClient, staff_token, reminders):
        res = await client.patch(f"{APP}/my/notifications/read-all", headers=auth_header(staff_token))
        assert res.status_code == 200
        assert res.json()["message"] == "1 notifications marked as read"


# ===== End to end =====

class TestShiftFlow:

    async def test_assign_start_close_report(self, client: AsyncClient, admin_token, staff_user, staff_token):
        """배정 → 출근 → 퇴근 → 보고서, 모두 HTTP로."""
        res = await client.post(
            "/api/v1/admin/attendances/assign",
            json={"user_id": str(staff_user.id), "location": SITE},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 201

        assert (await start(client, staff_token, start_time=START)).status_code == 200
        res = await client.post(f"{SHIFT}/close", json={**CLOSE_BODY, "end_time": END}, headers=auth_header(staff_token))
        assert res.status_code == 200

        res = await client.get(f"{SHIFT}/current", headers=auth_header(staff_token))
        assert res.status_code == 404

        report = await client.get(
            f"/api/v1/admin/reports/working-time/{staff_user.id}", headers=auth_header(admin_token)
        )
        assert report.json()["workingDaysDetails"][0]["totalWorkingTime"] == "2.50"

        records = await client.get(SHIFT, headers=auth_header(staff_token))
        assert [r["shift_state"] for r in records.json()["items"]] == [ShiftState.COMPLETED]
