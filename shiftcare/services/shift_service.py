"""근무 생명주기 서비스 — 배정, 출근, 퇴근 상태 머신.

Shift Lifecycle Service — The attendance state machine.

States per user:
    NoShift -> assigned -> in_progress -> completed
    assigned | in_progress -> superseded   (forced by a new assignment)

Every operation locks the user row first, validates all input and
preconditions, and only then mutates. At most one record per user is ever
open (assigned or in_progress); the partial unique index on
``attendance_records`` backs this up when two requests race.

The legacy presence toggle (``toggle_presence``) lives here as well but only
ever touches ``presence_state``; it is unrelated to the shift state machine.
"""

import logging
from datetime import date, datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.config import settings
from shiftcare.models.attendance import AttendanceRecord, PresenceState, ShiftState
from shiftcare.models.user import User
from shiftcare.repositories.attendance_repository import attendance_repository
from shiftcare.repositories.user_repository import user_repository
from shiftcare.utils.exceptions import (
    BadRequestError,
    ConflictError,
    GeofenceError,
    NotFoundError,
)
from shiftcare.utils.geo import is_valid_coordinate, within_radius
from shiftcare.utils.time_utils import ensure_utc, parse_timestamp, utc_day, utc_now

logger = logging.getLogger(__name__)


class ShiftService:
    """근무 생명주기 서비스.

    Shift lifecycle service: assign location, start work, close shift,
    presence toggle, and read helpers for current/active shifts.

    Args:
        start_radius_km: 출퇴근 허용 반경, None이면 설정값 사용
                         (Swipe radius; falls back to settings)
        assignment_radius_km: 배정 검증 반경, None이면 설정값 사용
                              (Coarse assignment radius; falls back to settings)
    """

    def __init__(
        self,
        start_radius_km: float | None = None,
        assignment_radius_km: float | None = None,
    ) -> None:
        self._start_radius_km: float | None = start_radius_km
        self._assignment_radius_km: float | None = assignment_radius_km

    @property
    def start_radius_km(self) -> float:
        if self._start_radius_km is not None:
            return self._start_radius_km
        return settings.START_WORK_RADIUS_KM

    @property
    def assignment_radius_km(self) -> float:
        if self._assignment_radius_km is not None:
            return self._assignment_radius_km
        return settings.ASSIGNMENT_RADIUS_KM

    # === 내부 헬퍼 (Internal helpers) ===

    async def _lock_user(self, db: AsyncSession, user_id: UUID) -> User:
        user: User | None = await user_repository.get_for_update(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _parse_location(location: Any) -> tuple[float, float, str | None]:
        """배정 위치 입력을 (위도, 경도, 이름)으로 검증/변환합니다.

        Accepts a mapping or a pydantic model. Missing or malformed
        coordinates are a validation error, never defaulted.
        """
        if location is None:
            raise BadRequestError("Location is required")
        if hasattr(location, "model_dump"):
            location = location.model_dump()
        if not isinstance(location, dict):
            raise BadRequestError("Location must be an object with latitude and longitude")

        missing: list[str] = [key for key in ("latitude", "longitude") if location.get(key) is None]
        if missing:
            raise BadRequestError(f"Location is missing required fields: {', '.join(missing)}")

        try:
            latitude = float(location["latitude"])
            longitude = float(location["longitude"])
        except (TypeError, ValueError):
            raise BadRequestError("Location latitude and longitude must be numbers")

        if not is_valid_coordinate(latitude, longitude):
            raise BadRequestError("Location coordinates are out of range")

        name = location.get("name")
        return latitude, longitude, name

    @staticmethod
    def _check_coordinates(latitude: float | None, longitude: float | None) -> None:
        if latitude is None or longitude is None:
            raise BadRequestError("User's current latitude and longitude are required")
        if not is_valid_coordinate(latitude, longitude):
            raise BadRequestError("Coordinates are out of range")

    @staticmethod
    def _resolve_time(value: str | datetime | None, now: datetime, field_name: str) -> datetime:
        if value is None or value == "":
            return now
        try:
            return parse_timestamp(value)
        except (TypeError, ValueError):
            raise BadRequestError(f"Invalid {field_name}: {value!r}")

    async def _create_record(self, db: AsyncSession, data: dict[str, Any]) -> AttendanceRecord:
        try:
            return await attendance_repository.create(db, data)
        except IntegrityError as exc:
            # 동시 요청이 먼저 열린 근무를 만든 경우 — lost the race on the open-shift index
            raise ConflictError("User already has an open shift") from exc

    # === 배정 (Assignment) ===

    async def assign_location(
        self,
        db: AsyncSession,
        user_id: UUID,
        location: Any,
        work_date: date | None = None,
        admin_coords: tuple[float, float] | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """사용자에게 근무 위치(와 근무일)를 배정합니다.

        Assign a location (and optional work date) to an admitted user.
        An open record scheduled for today (its work date, or its creation
        day when it has none) makes this a duplicate and is rejected. Any
        other open record is superseded before the new one is created.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 대상 사용자 UUID (Target user)
            location: {"latitude", "longitude", "name"?} 위치 (Assigned location)
            work_date: 근무 예정일, 선택 (Scheduled date, optional)
            admin_coords: 관리자 좌표, 선택 — 배정 위치가 설정 반경 이내여야 함
                          (Admin coordinates for the coarse radius check)
            now: 기준 시각, 테스트용 (Reference time, defaults to now)

        Returns:
            AttendanceRecord: 새로 생성된 assigned 기록 (New assigned record)

        Raises:
            BadRequestError: 위치 누락/오류, 미승인 사용자
                             (Missing/invalid location, user not admitted)
            NotFoundError: 사용자가 없을 때 (User not found)
            GeofenceError: 관리자 좌표에서 너무 멀 때 (Too far from admin coordinates)
            ConflictError: 오늘 이미 배정된 경우 (Duplicate assignment for today)
        """
        latitude, longitude, name = self._parse_location(location)
        now = ensure_utc(now) if now is not None else utc_now()

        user: User = await self._lock_user(db, user_id)
        if not user.is_admitted:
            raise BadRequestError("User has not been admitted yet")

        if admin_coords is not None:
            admin_lat, admin_lon = admin_coords
            self._check_coordinates(admin_lat, admin_lon)
            ok, distance = within_radius(admin_lat, admin_lon, latitude, longitude, self.assignment_radius_km)
            if not ok:
                raise GeofenceError(
                    f"Assigned location must be within {self.assignment_radius_km} km of the admin location",
                    distance_km=distance,
                    radius_km=self.assignment_radius_km,
                    assigned_location={"name": name, "latitude": latitude, "longitude": longitude},
                )

        today: date = now.date()
        open_records: Sequence[AttendanceRecord] = await attendance_repository.get_open_for_user(db, user.id)
        for record in open_records:
            scheduled: date = record.work_date or utc_day(record.created_at)
            if scheduled == today:
                raise ConflictError("Duplicate assignment for today: user already has a location assigned")

        if open_records:
            count: int = await attendance_repository.supersede_open(db, user.id, now)
            logger.info("Superseded %d open shift(s) for user %s", count, user.id)

        record = await self._create_record(
            db,
            {
                "user_id": user.id,
                "location_name": name,
                "latitude": latitude,
                "longitude": longitude,
                "work_date": work_date,
                "shift_state": ShiftState.ASSIGNED,
                "presence_state": PresenceState.ABSENT,
                "last_updated": now,
                "created_at": now,
            },
        )

        user.current_attendance_id = record.id
        await db.flush()
        return record

    # === 출근 (Start work) ===

    async def start_work(
        self,
        db: AsyncSession,
        user_id: UUID,
        latitude: float,
        longitude: float,
        start_time: str | datetime | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """배정된 위치 근처에서 출근(스와이프 인)합니다.

        Swipe in. The most recent assigned record is started when the user
        is within the start radius of its location. Re-starting a shift that
        is already in progress is a conflict.

        Raises:
            BadRequestError: 좌표/시각 오류 (Invalid coordinates or start time)
            NotFoundError: 사용자 또는 배정이 없을 때 (No user or no assignment)
            ConflictError: 이미 출근한 경우 (Work already started)
            GeofenceError: 허용 반경 밖 (Outside the start radius)
        """
        self._check_coordinates(latitude, longitude)
        now = ensure_utc(now) if now is not None else utc_now()
        started_at: datetime = self._resolve_time(start_time, now, "start time")

        user: User = await self._lock_user(db, user_id)

        record: AttendanceRecord | None = await attendance_repository.get_latest_in_state(
            db, user.id, ShiftState.ASSIGNED
        )
        if record is None:
            in_progress = await attendance_repository.get_latest_in_state(db, user.id, ShiftState.IN_PROGRESS)
            if in_progress is not None:
                raise ConflictError("Work already started for the current shift")
            raise NotFoundError("No assigned location. Please contact the admin.")

        if record.start_time is not None:
            raise ConflictError("Work already started for the current shift")
        if record.latitude is None or record.longitude is None:
            raise BadRequestError("Assigned shift has no coordinates")

        ok, distance = within_radius(latitude, longitude, record.latitude, record.longitude, self.start_radius_km)
        if not ok:
            raise GeofenceError(
                f"You must be within {int(self.start_radius_km * 1000)}m of the assigned location to start work",
                distance_km=distance,
                radius_km=self.start_radius_km,
                assigned_location=record.location,
            )

        record.shift_state = ShiftState.IN_PROGRESS
        record.start_time = started_at
        record.start_latitude = latitude
        record.start_longitude = longitude
        record.last_updated = now

        user.is_active = True
        user.ready_to_work = True
        user.current_attendance_id = record.id

        await db.flush()
        await db.refresh(record)
        return record

    # === 퇴근 (Close shift) ===

    async def close_shift(
        self,
        db: AsyncSession,
        user_id: UUID,
        nurse_signature: str,
        nurse_name: str,
        end_time: str | datetime | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """감독 간호사 서명과 함께 근무를 종료합니다.

        Swipe out with the supervising nurse's signature. This is the only
        transition that sets the signature fields and the only one that
        clears the user's ``ready_to_work`` and ``is_active`` flags.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            nurse_signature: 서명 (Signature blob/string)
            nurse_name: 간호사 이름 (Nurse name)
            end_time: 퇴근 시각, 선택 (Explicit end time, optional)
            latitude: 현재 위도, 선택 (Optional latitude for proximity check)
            longitude: 현재 경도, 선택 (Optional longitude for proximity check)
            now: 기준 시각, 테스트용 (Reference time, defaults to now)

        Returns:
            AttendanceRecord: 완료된 근태 기록 (Completed record)

        Raises:
            BadRequestError: 서명/이름 누락, 좌표 일부 누락, 종료 시각 오류
            NotFoundError: 사용자 또는 근무가 없을 때
            ConflictError: 미출근 또는 이미 완료된 근무
            GeofenceError: 출근 위치에서 너무 멀 때
        """
        if not nurse_signature or not nurse_signature.strip():
            raise BadRequestError("Nurse signature is required")
        if not nurse_name or not nurse_name.strip():
            raise BadRequestError("Nurse name is required")
        if (latitude is None) != (longitude is None):
            raise BadRequestError("Both latitude and longitude are required for the location check")
        if latitude is not None:
            self._check_coordinates(latitude, longitude)

        now = ensure_utc(now) if now is not None else utc_now()
        ended_at: datetime = self._resolve_time(end_time, now, "end time")

        user: User = await self._lock_user(db, user_id)

        record: AttendanceRecord | None = await attendance_repository.get_latest_in_state(
            db, user.id, ShiftState.IN_PROGRESS
        )
        if record is None:
            if await attendance_repository.get_latest_in_state(db, user.id, ShiftState.ASSIGNED) is not None:
                raise ConflictError("Work has not been started for the current shift")
            latest = await attendance_repository.get_latest_for_user(db, user.id, shifts_only=True)
            if latest is not None and latest.shift_state == ShiftState.COMPLETED:
                raise ConflictError("Shift already completed")
            raise NotFoundError("No active work assigned to this user")

        if record.end_time is not None:
            raise ConflictError("Shift already completed")

        if latitude is not None:
            ref_lat = record.start_latitude if record.start_latitude is not None else record.latitude
            ref_lon = record.start_longitude if record.start_longitude is not None else record.longitude
            ok, distance = within_radius(latitude, longitude, ref_lat, ref_lon, self.start_radius_km)
            if not ok:
                raise GeofenceError(
                    f"You must be within {int(self.start_radius_km * 1000)}m of the starting location to submit attendance",
                    distance_km=distance,
                    radius_km=self.start_radius_km,
                    assigned_location={"name": record.location_name, "latitude": ref_lat, "longitude": ref_lon},
                )

        started_at: datetime = ensure_utc(record.start_time)
        if ended_at <= started_at:
            raise BadRequestError("End time must be after start time")

        record.end_time = ended_at
        record.nurse_signature = nurse_signature
        record.nurse_name = nurse_name.strip()
        record.shift_state = ShiftState.COMPLETED
        record.last_updated = now

        user.ready_to_work = False
        user.is_active = False

        await db.flush()
        await db.refresh(record)
        return record

    # === 출석 토글 (Legacy presence toggle) ===

    async def toggle_presence(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """사용자의 출석 상태를 토글합니다 (레거시 기능).

        Legacy presence toggle. Creates a presence-only record (no shift
        state) marked present when the user has no records; otherwise flips
        ``presence_state`` on the newest record and bumps ``last_updated``.
        Shift state is never changed here.
        """
        now = ensure_utc(now) if now is not None else utc_now()
        user: User = await self._lock_user(db, user_id)

        record: AttendanceRecord | None = await attendance_repository.get_latest_for_user(db, user.id)
        if record is None:
            return await self._create_record(
                db,
                {
                    "user_id": user.id,
                    "shift_state": None,
                    "presence_state": PresenceState.PRESENT,
                    "last_updated": now,
                    "created_at": now,
                },
            )

        record.presence_state = (
            PresenceState.ABSENT if record.presence_state == PresenceState.PRESENT else PresenceState.PRESENT
        )
        record.last_updated = now
        await db.flush()
        await db.refresh(record)
        return record

    # === 조회 (Queries) ===

    async def get_current_shift(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> AttendanceRecord:
        """사용자의 현재 열린 근무를 조회합니다.

        Raises:
            NotFoundError: 사용자 또는 열린 근무가 없을 때
        """
        if await user_repository.get_by_id(db, user_id) is None:
            raise NotFoundError("User not found")
        open_records = await attendance_repository.get_open_for_user(db, user_id)
        if not open_records:
            raise NotFoundError("No active work assigned to this user")
        return open_records[0]

    async def list_active_users(
        self,
        db: AsyncSession,
    ) -> Sequence[tuple[User, AttendanceRecord]]:
        """근무 중인 사용자 목록 (Users with a shift in progress)."""
        return await user_repository.list_with_shift_in_progress(db)

    async def list_records(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        shift_state: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        """근태 기록 목록을 조회합니다.

        Raises:
            BadRequestError: 알 수 없는 근무 상태 필터 (Unknown shift state filter)
        """
        if shift_state is not None and shift_state not in ShiftState.ALL:
            raise BadRequestError(f"Unknown shift state: {shift_state}")
        return await attendance_repository.get_by_filters(
            db, user_id, shift_state, date_from, date_to, page, per_page
        )

    def build_response(self, record: AttendanceRecord) -> dict:
        """근태 응답 딕셔너리를 구성합니다 — 서명 원문은 포함하지 않음.

        Build the record response dict. The raw signature is never echoed
        back; only whether one is present.
        """
        return {
            "id": str(record.id),
            "user_id": str(record.user_id),
            "location": record.location,
            "work_date": record.work_date,
            "shift_state": record.shift_state,
            "presence_state": record.presence_state,
            "is_active": record.is_active,
            "start_time": ensure_utc(record.start_time),
            "end_time": ensure_utc(record.end_time),
            "nurse_name": record.nurse_name,
            "has_signature": record.nurse_signature is not None,
            "last_updated": ensure_utc(record.last_updated),
            "created_at": ensure_utc(record.created_at),
        }


# 싱글턴 인스턴스 — Singleton instance
shift_service: ShiftService = ShiftService()
