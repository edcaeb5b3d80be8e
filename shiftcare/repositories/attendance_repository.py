"""근태 기록 레포지토리 — 근무 상태 관련 DB 쿼리 담당.

Attendance Repository — Handles all shift/attendance record queries:
open-shift lookup per user, completed-history retrieval for reports,
upcoming-shift window for reminders, and superseding open shifts.
"""

from datetime import date, datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.models.attendance import AttendanceRecord, ShiftState
from shiftcare.repositories.base import BaseRepository


class AttendanceRepository(BaseRepository[AttendanceRecord]):
    """근태 기록 레포지토리.

    Extends:
        BaseRepository[AttendanceRecord]
    """

    def __init__(self) -> None:
        super().__init__(AttendanceRecord)

    async def get_open_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Sequence[AttendanceRecord]:
        """사용자의 열린 근무(assigned/in_progress)를 최신순으로 조회합니다.

        Retrieve open (assigned or in-progress) records for a user, newest
        first. The partial unique index keeps this to at most one
        row, but callers treat it as a list so legacy duplicates still get
        superseded.
        """
        query: Select = (
            select(AttendanceRecord)
            .where(AttendanceRecord.user_id == user_id)
            .where(AttendanceRecord.shift_state.in_(ShiftState.OPEN))
            .order_by(AttendanceRecord.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_latest_in_state(
        self,
        db: AsyncSession,
        user_id: UUID,
        shift_state: str,
    ) -> AttendanceRecord | None:
        """주어진 상태의 가장 최근 근태 기록을 조회합니다.

        Retrieve the most recently created record for a user in the given
        shift state (``created_at`` descending tie-break).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            shift_state: 근무 상태 (Shift state to match)

        Returns:
            AttendanceRecord | None: 근태 기록 또는 None (Record or None)
        """
        query: Select = (
            select(AttendanceRecord)
            .where(AttendanceRecord.user_id == user_id)
            .where(AttendanceRecord.shift_state == shift_state)
            .order_by(AttendanceRecord.created_at.desc())
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_latest_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        shifts_only: bool = False,
    ) -> AttendanceRecord | None:
        """사용자의 가장 최근 근태 기록을 조회합니다.

        Retrieve the user's newest record. With ``shifts_only`` presence-only
        records (no shift state) are ignored.
        """
        query: Select = select(AttendanceRecord).where(AttendanceRecord.user_id == user_id)
        if shifts_only:
            query = query.where(AttendanceRecord.shift_state.is_not(None))
        query = query.order_by(AttendanceRecord.created_at.desc()).limit(1)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def supersede_open(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime,
    ) -> int:
        """사용자의 열린 근무를 모두 superseded로 전환합니다.

        Move every open record of the user to the terminal ``superseded``
        state without touching signature fields. Records are kept.

        Returns:
            int: 전환된 기록 수 (Number of superseded records)
        """
        result = await db.execute(
            update(AttendanceRecord)
            .where(
                AttendanceRecord.user_id == user_id,
                AttendanceRecord.shift_state.in_(ShiftState.OPEN),
            )
            .values(shift_state=ShiftState.SUPERSEDED, last_updated=now, updated_at=now)
            .execution_options(synchronize_session="fetch")
        )
        await db.flush()
        return result.rowcount

    async def get_completed(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
    ) -> Sequence[AttendanceRecord]:
        """완료된 근무 기록을 조회합니다 (보고서용).

        Retrieve completed records with both timestamps set, for one user or
        for everyone, ordered by user then start time.
        """
        query: Select = (
            select(AttendanceRecord)
            .where(AttendanceRecord.shift_state == ShiftState.COMPLETED)
            .where(AttendanceRecord.start_time.is_not(None))
            .where(AttendanceRecord.end_time.is_not(None))
        )
        if user_id is not None:
            query = query.where(AttendanceRecord.user_id == user_id)
        query = query.order_by(AttendanceRecord.user_id, AttendanceRecord.start_time)
        result = await db.execute(query)
        return result.scalars().all()

    async def get_open_in_date_range(
        self,
        db: AsyncSession,
        date_from: date,
        date_to: date,
    ) -> Sequence[AttendanceRecord]:
        """근무일이 기간 내에 있는 열린 근무를 조회합니다 (알림 스윕용).

        Retrieve open records whose work date lies in ``[date_from, date_to]``.
        """
        query: Select = (
            select(AttendanceRecord)
            .where(AttendanceRecord.shift_state.in_(ShiftState.OPEN))
            .where(AttendanceRecord.work_date.is_not(None))
            .where(AttendanceRecord.work_date >= date_from)
            .where(AttendanceRecord.work_date <= date_to)
            .order_by(AttendanceRecord.work_date, AttendanceRecord.created_at)
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_by_filters(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        shift_state: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        """필터 조건에 맞는 근태 기록을 페이지네이션하여 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID 필터, 선택 (Optional user filter)
            shift_state: 근무 상태 필터, 선택 (Optional shift state filter)
            date_from: 근무일 시작 필터, 선택 (Optional work date lower bound)
            date_to: 근무일 종료 필터, 선택 (Optional work date upper bound)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[AttendanceRecord], int]: (근태 목록, 전체 개수)
        """
        query: Select = select(AttendanceRecord)

        if user_id is not None:
            query = query.where(AttendanceRecord.user_id == user_id)
        if shift_state is not None:
            query = query.where(AttendanceRecord.shift_state == shift_state)
        if date_from is not None:
            query = query.where(AttendanceRecord.work_date >= date_from)
        if date_to is not None:
            query = query.where(AttendanceRecord.work_date <= date_to)

        query = query.order_by(AttendanceRecord.created_at.desc())

        return await self.get_paginated(db, query, page, per_page)


# 싱글턴 인스턴스 — Singleton instance
attendance_repository: AttendanceRepository = AttendanceRepository()
