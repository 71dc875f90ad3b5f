"""
노선망 집계 (NetworkAggregator)

역 목록과 노선 목록(이미 교통수단/활성 여부로 필터링된 스냅샷)을 받아
역별 인접 정보, 환승역, 통계를 담은 NetworkView를 만든다.

- 순수 함수: 입력을 변경하지 않고 매 호출마다 새 결과를 생성 (캐시/전역 상태 없음)
- 역별 레코드는 노선을 순회하며 채워지므로, 어떤 노선에도 속하지 않은 역은
  stations 결과에 없지만 metadata.totalStations에는 포함됨
- connectedStations는 중복 제거하지 않음 (기존 API 응답과 동일)
"""

import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from app.models.domain import Location, Route, Station, StationRef
from app.models.network import (
    InterchangeProjection,
    LocationProjection,
    NetworkMetadata,
    NetworkStatistics,
    NetworkView,
    PricingProjection,
    RouteMembership,
    RouteProjection,
    StationConnections,
    StationProjection,
)


def round_half_away(value: float, digits: int = 0) -> float:
    """
    .5 경계에서 0에서 멀어지는 방향으로 반올림
    파이썬 round()는 banker's rounding이므로 사용하지 않음
    """
    factor = 10**digits
    scaled = abs(value) * factor
    rounded = math.floor(scaled + 0.5) / factor
    return math.copysign(rounded, value) if value else 0.0


def _location(location: Location) -> LocationProjection:
    return LocationProjection(lat=location.lat, lng=location.lng)


def _station_projection(station: StationRef) -> StationProjection:
    return StationProjection(
        id=str(station.station_id),
        name=station.name,
        location=_location(station.location),
    )


def _route_projection(route: Route) -> RouteProjection:
    return RouteProjection(
        id=str(route.route_id),
        name=route.name,
        description=route.description or "",
        distance=route.distance,
        pricing=PricingProjection(
            base_price=route.pricing.base_price,
            price_per_station=route.pricing.price_per_station,
            currency=route.pricing.currency,
        ),
        stations=[_station_projection(s) for s in route.stations],
        path=[dict(point) for point in route.path],
        created_at=route.created_at.isoformat() if route.created_at else None,
    )


def build_station_connections(
    routes: Sequence[Route],
) -> Dict[str, StationConnections]:
    """
    노선별 역 순서를 한 번씩 순회하며 역별 인접 역/소속 노선 기록
    {station_id: StationConnections} (처음 등장한 순서 유지)
    """
    connections: Dict[str, StationConnections] = {}

    for route in routes:
        sequence = route.stations
        total = len(sequence)

        for index, station in enumerate(sequence):
            station_id = str(station.station_id)

            record = connections.get(station_id)
            if record is None:
                record = StationConnections(station=_station_projection(station))
                connections[station_id] = record

            # 이전 역, 다음 역 (양방향 모두 기록되므로 대칭)
            if index > 0:
                record.connected_stations.append(
                    _station_projection(sequence[index - 1])
                )
            if index < total - 1:
                record.connected_stations.append(
                    _station_projection(sequence[index + 1])
                )

            record.routes.append(
                RouteMembership(
                    id=str(route.route_id),
                    name=route.name,
                    position=index + 1,
                    total_stations=total,
                )
            )

    return connections


def find_interchanges(
    connections: Dict[str, StationConnections],
) -> List[InterchangeProjection]:
    """2개 이상의 노선에 속한 역 = 환승역 (Station.station_type과 무관)"""
    return [
        InterchangeProjection(
            id=record.station.id,
            name=record.station.name,
            location=record.station.location,
            route_count=len(record.routes),
            routes=[membership.model_copy() for membership in record.routes],
        )
        for record in connections.values()
        if len(record.routes) > 1
    ]


def compute_statistics(
    connections: Dict[str, StationConnections],
    routes: Sequence[Route],
    total_stations: int,
) -> Dict[str, float]:
    total_routes = len(routes)

    # 각 구간은 양 끝 역에서 한 번씩 기록되므로 절반
    raw_connections = (
        sum(len(record.connected_stations) for record in connections.values()) / 2
    )

    if total_routes > 0:
        avg_stations = round_half_away(
            sum(len(route.stations) for route in routes) / total_routes, 2
        )
        avg_length = round_half_away(
            sum(route.distance or 0 for route in routes) / total_routes, 2
        )
    else:
        avg_stations = 0
        avg_length = 0

    density = (
        round_half_away(raw_connections / total_stations, 2)
        if total_stations > 0
        else 0
    )

    return {
        "total_connections": int(round_half_away(raw_connections)),
        "average_stations_per_route": avg_stations,
        "average_route_length": avg_length,
        "network_density": density,
    }


def build_network_view(
    stations: Sequence[Station],
    routes: Sequence[Route],
    generated_at: Optional[datetime] = None,
) -> NetworkView:
    """
    노선망 뷰 생성

    Args:
        stations: 활성 역 목록 (totalStations 계산에만 사용)
        routes: 활성 노선 목록 (역 참조는 populate 완료 상태)
        generated_at: 생성 시각 (기본값: 현재 UTC)

    Returns:
        NetworkView
    """
    generated_at = generated_at or datetime.now(timezone.utc)

    connections = build_station_connections(routes)
    interchanges = find_interchanges(connections)
    stats = compute_statistics(connections, routes, len(stations))

    return NetworkView(
        metadata=NetworkMetadata(
            total_stations=len(stations),
            total_routes=len(routes),
            total_connections=stats["total_connections"],
            interchange_count=len(interchanges),
            last_updated=generated_at.isoformat(),
        ),
        stations=list(connections.values()),
        routes=[_route_projection(route) for route in routes],
        interchanges=interchanges,
        statistics=NetworkStatistics(
            average_stations_per_route=stats["average_stations_per_route"],
            average_route_length=stats["average_route_length"],
            network_density=stats["network_density"],
        ),
    )
