"""근무시간 보고서 스키마 정의.

Working-time report schemas. Fields are snake_case in Python and serialize
to the camelCase JSON shape consumed by the admin dashboard and mobile app
(``totalWorkingDays``, ``workingDaysDetails``, ...).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivityDetail(_CamelModel):
    """근무 1건 상세 (One completed shift inside a day bucket)."""

    attendance_id: str
    start_time: str
    end_time: str
    location: dict
    working_time: str  # "H.HH"


class DaySummary(_CamelModel):
    """일별 근무 요약 (Per-day bucket)."""

    date: str  # "YYYY-MM-DD"
    total_working_time: str  # "H.HH"
    total_working_time_seconds: float
    activities: list[ActivityDetail]


class ReportUser(_CamelModel):
    """보고서 사용자 정보 (User identity in reports)."""

    id: str
    first_name: str
    last_name: str
    email: str


class UserWorkingSummary(_CamelModel):
    """사용자별 근무 요약 (Per-user summary)."""

    user: ReportUser
    total_working_days: int
    working_days_details: list[DaySummary]


class AllUsersWorkingSummary(_CamelModel):
    """전체 사용자 근무 요약 (All-users summary grouped by user, then day)."""

    total_users: int
    users: list[UserWorkingSummary]
