"""시간 관련 유틸리티 — 모든 타임스탬프는 UTC로 정규화.

Time helpers. Every timestamp handled by the services is normalized to an
aware UTC datetime; naive values (as returned by SQLite) are taken as UTC.
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """현재 UTC 시각 (aware datetime)."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """naive datetime은 UTC로 간주하고, aware datetime은 UTC로 변환합니다."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """ISO 8601 문자열 또는 datetime을 UTC datetime으로 변환합니다.

    Parse an ISO 8601 string (a trailing ``Z`` is accepted) or pass through a
    datetime, normalizing to aware UTC.

    Raises:
        ValueError: 해석할 수 없는 문자열 (Unparseable string)
        TypeError: 지원하지 않는 타입 (Unsupported type)
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        text: str = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return ensure_utc(datetime.fromisoformat(text))
    raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")


def utc_day(dt: datetime) -> date:
    """UTC 기준 날짜로 절삭합니다 (Truncate to the UTC calendar date)."""
    return ensure_utc(dt).date()
