"""근무시간 보고서 서비스 — 완료된 근무의 일별/사용자별 집계.

Report Service — Working-time aggregation over completed shifts.
Only ``completed`` records with both timestamps participate; records are
bucketed by the UTC calendar date of their start time. Superseded shifts
never count.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from io import BytesIO
from typing import Any, Sequence
from uuid import UUID

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.models.attendance import AttendanceRecord
from shiftcare.models.user import User
from shiftcare.repositories.attendance_repository import attendance_repository
from shiftcare.repositories.user_repository import user_repository
from shiftcare.schemas.report import (
    ActivityDetail,
    AllUsersWorkingSummary,
    DaySummary,
    ReportUser,
    UserWorkingSummary,
)
from shiftcare.utils.exceptions import NotFoundError
from shiftcare.utils.time_utils import ensure_utc

logger = logging.getLogger(__name__)


def format_hours(seconds: float) -> str:
    """초를 소수 둘째 자리 시간 문자열로 변환합니다 — 음수는 0.

    Convert seconds to hours formatted as ``"H.HH"``; negatives clamp to
    ``"0.00"``.
    """
    if seconds <= 0:
        return "0.00"
    return f"{seconds / 3600:.2f}"


def _report_user(user: User) -> ReportUser:
    return ReportUser(
        id=str(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
    )


class ReportService:
    """근무시간 보고서 서비스.

    Working-time report service. Builds per-day buckets for a user, the
    all-users summary and the Excel export.
    """

    @staticmethod
    def _duration(record: AttendanceRecord) -> tuple[date, float] | None:
        """근무 1건의 (근무일, 초)를 계산합니다. 해석 불가 시 None."""
        try:
            start: datetime = ensure_utc(record.start_time)
            end: datetime = ensure_utc(record.end_time)
            return start.date(), (end - start).total_seconds()
        except (AttributeError, TypeError, ValueError):
            logger.warning("Skipping attendance %s: timestamps cannot be interpreted", record.id)
            return None

    def group_by_day(self, records: Sequence[AttendanceRecord]) -> list[DaySummary]:
        """근무 기록을 UTC 날짜별로 묶어 일별 요약을 만듭니다.

        Group completed records into day buckets sorted ascending. Each
        bucket's total is the sum of its activities' durations.

        Args:
            records: 완료된 근무 기록 (Completed records)

        Returns:
            list[DaySummary]: 날짜 오름차순 일별 요약 (Day buckets, ascending)
        """
        buckets: dict[date, list[tuple[AttendanceRecord, float]]] = defaultdict(list)
        for record in records:
            computed = self._duration(record)
            if computed is None:
                continue
            day, seconds = computed
            buckets[day].append((record, seconds))

        days: list[DaySummary] = []
        for day in sorted(buckets):
            entries = buckets[day]
            total_seconds: float = sum(max(seconds, 0.0) for _, seconds in entries)
            activities = [
                ActivityDetail(
                    attendance_id=str(record.id),
                    start_time=ensure_utc(record.start_time).isoformat(),
                    end_time=ensure_utc(record.end_time).isoformat(),
                    location=record.location,
                    working_time=format_hours(seconds),
                )
                for record, seconds in entries
            ]
            days.append(
                DaySummary(
                    date=day.isoformat(),
                    total_working_time=format_hours(total_seconds),
                    total_working_time_seconds=total_seconds,
                    activities=activities,
                )
            )
        return days

    async def summarize_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> UserWorkingSummary:
        """사용자 1명의 근무시간 요약을 생성합니다.

        Raises:
            NotFoundError: 사용자가 없을 때 (User not found)
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")

        records = await attendance_repository.get_completed(db, user_id=user.id)
        days: list[DaySummary] = self.group_by_day(records)
        return UserWorkingSummary(
            user=_report_user(user),
            total_working_days=len(days),
            working_days_details=days,
        )

    async def summarize_all(self, db: AsyncSession) -> AllUsersWorkingSummary:
        """전체 사용자 근무시간 요약 — 완료된 근무가 있는 사용자만 포함.

        All-users summary grouped by user, then by day. Users without any
        completed shift are left out.
        """
        records = await attendance_repository.get_completed(db)
        by_user: dict[UUID, list[AttendanceRecord]] = defaultdict(list)
        for record in records:
            by_user[record.user_id].append(record)

        users: dict[UUID, User] = await user_repository.get_by_ids(db, set(by_user))
        summaries: list[UserWorkingSummary] = []
        for user_id, user_records in by_user.items():
            user = users.get(user_id)
            if user is None:
                logger.warning("Skipping %d attendance record(s) of missing user %s", len(user_records), user_id)
                continue
            days = self.group_by_day(user_records)
            summaries.append(
                UserWorkingSummary(
                    user=_report_user(user),
                    total_working_days=len(days),
                    working_days_details=days,
                )
            )

        summaries.sort(key=lambda s: (s.user.last_name.lower(), s.user.first_name.lower(), s.user.id))
        return AllUsersWorkingSummary(total_users=len(summaries), users=summaries)

    async def export_workbook(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
    ) -> bytes:
        """근무시간 보고서를 Excel 파일로 내보내기.

        Export the working-time report as ``.xlsx`` bytes: an "Activities"
        sheet with one row per completed shift and a "Daily Totals" sheet
        with one row per user and day.
        """
        if user_id is not None:
            summaries: list[UserWorkingSummary] = [await self.summarize_user(db, user_id)]
        else:
            summaries = (await self.summarize_all(db)).users

        wb = Workbook()
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_fill = PatternFill(start_color="2D3436", end_color="2D3436", fill_type="solid")

        def style_headers(ws: Any, headers: list[str]) -> None:
            for col_idx, h in enumerate(headers, 1):
                cell = ws.cell(row=1, column=col_idx, value=h)
                cell.font = header_font
                cell.fill = header_fill
                cell.alignment = Alignment(horizontal="center")

        # --- Sheet 1: Activities ---
        ws1 = wb.active
        ws1.title = "Activities"
        style_headers(ws1, ["User", "Email", "Date", "Location", "Start", "End", "Hours"])

        # --- Sheet 2: Daily Totals ---
        ws2 = wb.create_sheet("Daily Totals")
        style_headers(ws2, ["User", "Email", "Date", "Shifts", "Total Hours"])

        for summary in summaries:
            name = f"{summary.user.first_name} {summary.user.last_name}"
            for day in summary.working_days_details:
                for activity in day.activities:
                    ws1.append([
                        name,
                        summary.user.email,
                        day.date,
                        activity.location.get("name") or "",
                        activity.start_time,
                        activity.end_time,
                        float(activity.working_time),
                    ])
                ws2.append([
                    name,
                    summary.user.email,
                    day.date,
                    len(day.activities),
                    float(day.total_working_time),
                ])

        for i, w in enumerate([22, 28, 12, 24, 28, 28, 10], 1):
            ws1.column_dimensions[ws1.cell(row=1, column=i).column_letter].width = w
        for i, w in enumerate([22, 28, 12, 10, 12], 1):
            ws2.column_dimensions[ws2.cell(row=1, column=i).column_letter].width = w

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()


# 싱글턴 인스턴스
report_service: ReportService = ReportService()
