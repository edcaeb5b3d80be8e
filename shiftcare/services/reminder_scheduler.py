"""근무 알림 스케줄러 — 예정된 근무에 대한 주기적 알림 생성.

Reminder Scheduler — Periodic sweep that reminds users of shifts scheduled
within the lookahead window.

The sweep is idempotent: the existence check plus the
``uq_notification_user_attendance`` constraint guarantee at most one
reminder per (user, attendance) pair, however many times it runs. Each
candidate is handled in its own session so one bad record never aborts the
rest of the run.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shiftcare.config import settings
from shiftcare.models.attendance import AttendanceRecord, ShiftState
from shiftcare.repositories.attendance_repository import attendance_repository
from shiftcare.services.notification_service import notification_service
from shiftcare.utils.time_utils import ensure_utc, utc_now

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """알림 스윕 1회 결과 (Counters for one sweep run)."""

    scanned: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0


def reminder_window(now: datetime, lookahead_hours: int) -> tuple[date, date]:
    """알림 대상 근무일 범위 — 날짜 단위 비교 (Inclusive work-date window)."""
    return now.date(), (now + timedelta(hours=lookahead_hours)).date()


async def _remind_one(
    session_factory: async_sessionmaker[AsyncSession],
    attendance_id: UUID,
) -> bool:
    """근무 1건에 대한 알림을 별도 트랜잭션에서 생성합니다.

    Returns True when a notification was created, False when the record is
    no longer open or was already reminded.
    """
    async with session_factory() as db:
        record: AttendanceRecord | None = await attendance_repository.get_by_id(db, attendance_id)
        # 조회 이후 상태가 바뀐 경우 — record closed or superseded since the scan
        if record is None or record.shift_state not in ShiftState.OPEN or record.work_date is None:
            return False
        notification = await notification_service.create_shift_reminder(db, record)
        if notification is None:
            return False
        await db.commit()
        return True


async def run_reminder_sweep(
    session_factory: async_sessionmaker[AsyncSession],
    now: datetime | None = None,
    lookahead_hours: int | None = None,
) -> SweepResult:
    """예정된 근무에 대해 알림을 1회 생성합니다.

    Run one reminder sweep over open shifts whose work date falls within
    ``[now, now + lookahead]`` (compared by date).

    Args:
        session_factory: 세션 팩토리 (Session factory of the app database)
        now: 기준 시각, 기본값 현재 UTC (Reference time, defaults to now)
        lookahead_hours: 조회 범위 시간, 기본값 설정값 (Window size, defaults to settings)

    Returns:
        SweepResult: 스캔/생성/건너뜀/실패 건수 (Sweep counters)
    """
    now = ensure_utc(now) if now is not None else utc_now()
    hours: int = lookahead_hours if lookahead_hours is not None else settings.REMINDER_LOOKAHEAD_HOURS
    date_from, date_to = reminder_window(now, hours)

    async with session_factory() as db:
        candidates = await attendance_repository.get_open_in_date_range(db, date_from, date_to)
        candidate_ids: list[UUID] = [record.id for record in candidates]

    result = SweepResult(scanned=len(candidate_ids))
    for attendance_id in candidate_ids:
        try:
            if await _remind_one(session_factory, attendance_id):
                result.created += 1
            else:
                result.skipped += 1
        except IntegrityError:
            # 다른 스윕이 먼저 생성 — another sweep inserted the same pair first
            logger.warning("Reminder for attendance %s already exists, skipping", attendance_id)
            result.skipped += 1
        except Exception:
            logger.exception("Failed to create reminder for attendance %s", attendance_id)
            result.failed += 1

    logger.info(
        "Reminder sweep %s..%s: scanned=%d created=%d skipped=%d failed=%d",
        date_from,
        date_to,
        result.scanned,
        result.created,
        result.skipped,
        result.failed,
    )
    return result


class ReminderScheduler:
    """주기적 알림 스윕 백그라운드 작업.

    Background asyncio task that runs the reminder sweep every
    ``interval_seconds``. Started and cancelled by the application lifespan.

    Args:
        session_factory: 세션 팩토리 (Session factory of the app database)
        interval_seconds: 실행 간격 초, None이면 설정값 (Interval; falls back to settings)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        interval_seconds: float | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.interval_seconds: float = (
            interval_seconds if interval_seconds is not None else settings.REMINDER_INTERVAL_SECONDS
        )
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            try:
                await run_reminder_sweep(self.session_factory)
            except Exception:
                logger.exception("Reminder sweep failed")
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            return
        logger.info("Starting reminder scheduler (every %ss)", self.interval_seconds)
        self._task = asyncio.create_task(self._run(), name="reminder-sweep")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Reminder scheduler stopped")
