import math
from typing import Iterable, List, Tuple, TypeVar

from app.models.domain import Location

T = TypeVar("T")


class DistanceCalculator:
    EARTH_RADIUS = 6371000  # meters

    @staticmethod
    def haversine(coord1: Tuple[float, float], coord2: Tuple[float, float]) -> float:
        """하버사인 공식으로 지구의 곡률 고려하여 두 좌표 간 거리 계산(meter)"""
        lat1, lon1 = coord1
        lat2, lon2 = coord2

        # radian convertion
        lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

        dlat = lat2 - lat1
        dlon = lon2 - lon1
        a = (
            math.sin(dlat / 2) ** 2
            + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        )
        c = 2 * math.asin(math.sqrt(a))
        return DistanceCalculator.EARTH_RADIUS * c

    @staticmethod
    def within_radius(
        origin: Location,
        items: Iterable[T],
        location_of,
        max_distance_m: float,
    ) -> List[Tuple[T, float]]:
        """
        origin에서 max_distance_m 이내 항목을 가까운 순으로 반환
        location_of(item)이 None인 항목은 제외
        """
        center = (origin.lat, origin.lng)
        found = []
        for item in items:
            location = location_of(item)
            if location is None:
                continue
            distance = DistanceCalculator.haversine(
                center, (location.lat, location.lng)
            )
            if distance <= max_distance_m:
                found.append((item, distance))

        found.sort(key=lambda pair: pair[1])
        return found
