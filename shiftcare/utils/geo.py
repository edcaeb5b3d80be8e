"""지오펜스 거리 계산 유틸리티.

Geofencing distance utilities.
Great-circle distance on a spherical Earth (haversine formula), used to
decide whether a swipe happens close enough to the assigned location.
"""

import math

# 지구 평균 반지름 (km) — Mean Earth radius in kilometers
EARTH_RADIUS_KM: float = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """두 좌표 사이의 대원 거리를 km 단위로 계산합니다.

    Haversine distance between two coordinates in kilometers.
    Symmetric in its two coordinate pairs and never negative.

    Args:
        lat1: 첫 번째 위도 (First latitude, degrees)
        lon1: 첫 번째 경도 (First longitude, degrees)
        lat2: 두 번째 위도 (Second latitude, degrees)
        lon2: 두 번째 경도 (Second longitude, degrees)

    Returns:
        float: 거리 km (Distance in kilometers)
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # 부동소수 오차로 a가 [0, 1] 밖으로 나가는 경우 보정 (clamp rounding drift)
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def within_radius(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_km: float,
) -> tuple[bool, float]:
    """반경 내 여부와 계산된 거리를 함께 반환합니다.

    Return ``(is_within, distance)`` so callers can report the distance
    when rejecting.
    """
    distance: float = distance_km(lat1, lon1, lat2, lon2)
    return distance <= radius_km, distance


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
    """위도/경도 범위 검사 (Latitude in [-90, 90], longitude in [-180, 180])."""
    return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0
