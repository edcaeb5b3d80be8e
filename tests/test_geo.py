"""지오펜스 거리 계산 테스트.

Haversine distance tests: symmetry, zero distance, known distances and the
swipe radius boundary.
"""

import math

import pytest

from shiftcare.utils.geo import EARTH_RADIUS_KM, distance_km, is_valid_coordinate, within_radius

# 위도 1도 ≈ 111.195 km (R = 6371 km)
KM_PER_DEGREE_LAT = EARTH_RADIUS_KM * math.pi / 180


class TestDistance:
    """거리 계산 속성 테스트."""

    @pytest.mark.parametrize(
        "a, b",
        [
            ((10.0, 20.0), (10.001, 20.001)),
            ((37.5665, 126.9780), (35.1796, 129.0756)),
            ((-33.8688, 151.2093), (51.5074, -0.1278)),
        ],
    )
    def test_symmetric(self, a, b):
        assert distance_km(*a, *b) == pytest.approx(distance_km(*b, *a))

    def test_same_point_is_zero(self):
        assert distance_km(10.0, 20.0, 10.0, 20.0) == 0.0

    def test_never_negative(self):
        assert distance_km(0.0, 0.0, 0.0, 179.999) >= 0.0

    def test_one_degree_latitude(self):
        assert distance_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(KM_PER_DEGREE_LAT, rel=1e-9)

    def test_antipodal_points(self):
        """a가 부동소수 오차로 1을 넘어도 NaN이 나오지 않아야 함."""
        d = distance_km(0.0, 0.0, 0.0, 180.0)
        assert not math.isnan(d)
        assert d == pytest.approx(math.pi * EARTH_RADIUS_KM, rel=1e-9)

    def test_seoul_busan(self):
        """서울-부산 약 325 km."""
        assert distance_km(37.5665, 126.9780, 35.1796, 129.0756) == pytest.approx(325, abs=5)


class TestWithinRadius:
    """반경 판정 테스트."""

    def test_inside_radius(self):
        ok, d = within_radius(10.0, 20.0, 10.0036, 20.0, 0.5)
        assert ok is True
        assert d == pytest.approx(0.4, abs=0.01)

    def test_outside_radius(self):
        ok, d = within_radius(10.0, 20.0, 10.0054, 20.0, 0.5)
        assert ok is False
        assert d == pytest.approx(0.6, abs=0.01)

    def test_swipe_from_nearby_point(self):
        ok, d = within_radius(10.001, 20.001, 10.0, 20.0, 0.5)
        assert ok is True
        assert d < 0.2


class TestValidCoordinate:

    @pytest.mark.parametrize("lat, lon", [(0, 0), (90, 180), (-90, -180), (45.5, -122.6)])
    def test_valid(self, lat, lon):
        assert is_valid_coordinate(lat, lon)

    @pytest.mark.parametrize("lat, lon", [(90.1, 0), (-91, 0), (0, 180.5), (0, -181)])
    def test_invalid(self, lat, lon):
        assert not is_valid_coordinate(lat, lon)
