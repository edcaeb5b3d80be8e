"""근태 관련 Pydantic 요청/응답 스키마 정의.

Attendance request/response schema definitions: location assignment,
swipe in (start work), swipe out (close shift) and record responses.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field


class LocationInput(BaseModel):
    """배정 위치 입력 — 좌표 필수, 이름 선택.

    Assigned location input. Coordinates are required; the place name is
    optional. Missing sub-fields are rejected, never defaulted.
    """

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    name: str | None = Field(default=None, max_length=255)


class AssignLocationRequest(BaseModel):
    """근무 위치 배정 요청 스키마 (관리자).

    Attributes:
        user_id: 대상 사용자 UUID (Target user)
        location: 배정 위치 (Assigned location)
        work_date: 근무 예정일, 선택 (Scheduled date, optional)
        admin_latitude: 관리자 현재 위도, 선택 (Admin latitude for coarse check)
        admin_longitude: 관리자 현재 경도, 선택 (Admin longitude for coarse check)
    """

    user_id: str
    location: LocationInput
    work_date: date | None = None
    admin_latitude: float | None = Field(default=None, ge=-90, le=90)
    admin_longitude: float | None = Field(default=None, ge=-180, le=180)


class StartWorkRequest(BaseModel):
    """출근(스와이프 인) 요청 스키마.

    Attributes:
        latitude: 사용자 현재 위도 (User's current latitude)
        longitude: 사용자 현재 경도 (User's current longitude)
        start_time: 출근 시각 ISO 문자열, 선택 (Explicit start time, optional)
    """

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    start_time: str | None = None


class CloseShiftRequest(BaseModel):
    """퇴근(스와이프 아웃) 요청 스키마 — 감독 간호사 서명 필수.

    Attributes:
        nurse_signature: 서명 (Signature, base64 image or text)
        nurse_name: 간호사 이름 (Supervising nurse name)
        end_time: 퇴근 시각 ISO 문자열, 선택 (Explicit end time, optional)
        latitude: 현재 위도, 선택 (Current latitude, optional)
        longitude: 현재 경도, 선택 (Current longitude, optional)
    """

    nurse_signature: str = Field(..., min_length=1)
    nurse_name: str = Field(..., min_length=1, max_length=255)
    end_time: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class AttendanceResponse(BaseModel):
    """근태 기록 응답 스키마.

    ``is_active`` mirrors the legacy boolean (open shift); ``shift_state``
    and ``presence_state`` are the authoritative fields.
    """

    id: str
    user_id: str
    location: dict
    work_date: date | None = None
    shift_state: str | None = None
    presence_state: str
    is_active: bool
    start_time: datetime | None = None
    end_time: datetime | None = None
    nurse_name: str | None = None
    has_signature: bool = False
    last_updated: datetime
    created_at: datetime


class ActiveUserResponse(BaseModel):
    """근무 중 사용자 응답 스키마 (User currently on shift)."""

    user_id: str
    first_name: str
    last_name: str
    email: str
    attendance: AttendanceResponse
