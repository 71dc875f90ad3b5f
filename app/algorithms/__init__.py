"""
노선망 집계 알고리즘 (역 연결 관계, 환승역, 네트워크 통계)
좌표 간 거리 계산 (주변 사용자 조회)
"""

from app.algorithms.network_aggregator import (
    build_network_view,
    build_station_connections,
    find_interchanges,
    compute_statistics,
    round_half_away,
)
from app.algorithms.distance_calculator import DistanceCalculator

__all__ = [
    "build_network_view",
    "build_station_connections",
    "find_interchanges",
    "compute_statistics",
    "round_half_away",
    "DistanceCalculator",
]
