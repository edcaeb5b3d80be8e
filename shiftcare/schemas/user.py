"""사용자 관련 Pydantic 응답 스키마 정의.

User response schema definitions.
"""

from datetime import date, datetime

from pydantic import BaseModel


class UserResponse(BaseModel):
    """사용자 응답 스키마 — 비밀번호 해시는 절대 포함하지 않음.

    User response schema. Never includes the password hash.
    """

    id: str
    email: str
    first_name: str
    last_name: str
    phone_number: str | None = None
    date_of_birth: date | None = None
    role: str
    is_admitted: bool
    is_active: bool
    ready_to_work: bool
    current_attendance_id: str | None = None
    created_at: datetime


class AdmitRequest(BaseModel):
    """사용자 승인/승인 취소 요청 (Admit or revoke admission)."""

    is_admitted: bool = True
