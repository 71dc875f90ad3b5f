from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

# 노선망(NetworkView) 응답 구조 정의
# JSON 키는 프론트엔드(metro network 지도)가 사용하는 camelCase 유지


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LocationProjection(_CamelModel):
    lat: float
    lng: float


class StationProjection(_CamelModel):
    id: str
    name: str
    location: LocationProjection


class RouteMembership(_CamelModel):
    id: str
    name: str
    position: int = Field(..., description="노선 내 1-based 순서")
    total_stations: int = Field(..., alias="totalStations")


# 역별 인접 정보
# connectedStations는 중복 제거하지 않음 (여러 노선이 같은 구간을 공유하면 중복 기록)
class StationConnections(_CamelModel):
    station: StationProjection
    connected_stations: List[StationProjection] = Field(
        default_factory=list, alias="connectedStations"
    )
    routes: List[RouteMembership] = Field(default_factory=list)


class PricingProjection(_CamelModel):
    base_price: float = Field(..., alias="basePrice")
    price_per_station: float = Field(0, alias="pricePerStation")
    currency: str


class RouteProjection(_CamelModel):
    id: str
    name: str
    description: str = ""
    distance: float
    pricing: PricingProjection
    stations: List[StationProjection]
    path: List[Dict[str, float]] = Field(default_factory=list)
    created_at: Optional[str] = Field(None, alias="createdAt")


class InterchangeProjection(_CamelModel):
    id: str
    name: str
    location: LocationProjection
    route_count: int = Field(..., alias="routeCount")
    routes: List[RouteMembership]


class NetworkMetadata(_CamelModel):
    total_stations: int = Field(..., alias="totalStations")
    total_routes: int = Field(..., alias="totalRoutes")
    total_connections: int = Field(..., alias="totalConnections")
    interchange_count: int = Field(..., alias="interchangeCount")
    last_updated: str = Field(..., alias="lastUpdated")


class NetworkStatistics(_CamelModel):
    average_stations_per_route: float = Field(..., alias="averageStationsPerRoute")
    average_route_length: float = Field(..., alias="averageRouteLength")
    network_density: float = Field(..., alias="networkDensity")


class NetworkView(_CamelModel):
    metadata: NetworkMetadata
    stations: List[StationConnections]
    routes: List[RouteProjection]
    interchanges: List[InterchangeProjection]
    statistics: NetworkStatistics


# 성공 응답 envelope
class NetworkViewResponse(BaseModel):
    success: bool = True
    data: NetworkView


def to_envelope(data: Any) -> Dict[str, Any]:
    """{success: true, data} 형태로 감싸기 (pydantic 모델은 alias 기준 직렬화)"""
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, mode="json")
    return {"success": True, "data": data}
