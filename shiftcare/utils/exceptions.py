"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the error taxonomy used
across services and repositories, so call sites never specify status codes.

Usage:
    from shiftcare.utils.exceptions import NotFoundError, ConflictError
    raise NotFoundError("User not found")
    raise ConflictError("Work already started")
"""

from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a referenced user or attendance record does not exist.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외 — 상태 머신 위반 시 사용.

    Raised on shift state-machine violations: duplicate assignment for today,
    work already started, shift already completed, duplicate registration.
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용."""

    def __init__(self, detail: Any = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class GeofenceError(ForbiddenError):
    """403 지오펜스 위반 — 허용 반경 밖에서 출퇴근 시도.

    Geofence violation. The detail payload carries the computed distance and
    the reference location so the client can show the user how far off they are.

    Args:
        message: 오류 메시지 (Human-readable message)
        distance_km: 계산된 거리 (Computed distance in km)
        radius_km: 허용 반경 (Allowed radius in km)
        assigned_location: 기준 위치 (Reference location dict)
    """

    def __init__(
        self,
        message: str,
        distance_km: float,
        radius_km: float,
        assigned_location: dict[str, Any],
    ) -> None:
        self.distance_km: float = distance_km
        self.radius_km: float = radius_km
        self.assigned_location: dict[str, Any] = assigned_location
        super().__init__(
            detail={
                "message": message,
                "distance_km": round(distance_km, 3),
                "radius_km": radius_km,
                "assigned_location": assigned_location,
            }
        )


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    Raised when input is missing or malformed beyond what Pydantic catches
    (e.g. end time before start time, unparseable timestamps).
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InternalError(HTTPException):
    """500 Internal Server Error — 저장소 오류 등 예기치 못한 실패."""

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
