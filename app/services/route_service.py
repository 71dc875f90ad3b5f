import logging
from typing import Dict, List, Optional, Tuple

from app.core.config import METRO_TRANSPORT_TYPE, TRANSPORT_TYPES
from app.core.exceptions import InvalidRequestException, RouteNotFoundException
from app.db import repository
from app.models.domain import Admin, Pricing, Route
from app.models.requests import RouteCreateRequest, RouteUpdateRequest
from app.services.network_service import NetworkService
from app.services.ownership import ensure_can_modify, parse_id

logger = logging.getLogger(__name__)


def normalize_pricing(
    transport_type: str,
    base_price: float,
    price_per_station: Optional[float],
    currency: str,
) -> Pricing:
    """
    역당 요금은 metro 노선에서만 의미 있음
    => metro 이외의 교통수단은 생성/수정 모두 0으로 고정
    """
    if transport_type != METRO_TRANSPORT_TYPE:
        price_per_station = 0
    return Pricing(
        base_price=base_price,
        price_per_station=price_per_station or 0,
        currency=currency,
    )


class RouteService:
    @staticmethod
    def _validate_station_ids(station_ids: List[str]) -> List[str]:
        ids = [parse_id(station_id, "station") for station_id in station_ids]

        # 존재하고 활성화된 역이어야 함 (같은 역 중복 참조는 허용)
        active_ids = repository.find_active_station_ids(set(ids))
        if any(station_id not in active_ids for station_id in ids):
            raise InvalidRequestException("One or more stations not found")
        return ids

    @staticmethod
    def list_routes(page: int, limit: int) -> Tuple[List[Route], int]:
        offset = (page - 1) * limit
        routes = repository.list_routes(active=True, limit=limit, offset=offset)
        total = repository.count_routes(active=True)
        return routes, total

    @staticmethod
    def get_route(route_id: str) -> Route:
        route = repository.get_route_by_id(parse_id(route_id, "route"))
        if route is None or not route.is_active:
            raise RouteNotFoundException()
        return route

    @staticmethod
    def list_routes_by_type(transport_type: str) -> List[Route]:
        if transport_type not in TRANSPORT_TYPES:
            raise InvalidRequestException("Invalid transport type")
        return repository.list_routes(transport_type=transport_type, active=True)

    @staticmethod
    def create_route(data: RouteCreateRequest, admin: Admin) -> Route:
        station_ids = RouteService._validate_station_ids(data.station_ids)

        pricing = normalize_pricing(
            data.transport_type,
            data.pricing.base_price,
            data.pricing.price_per_station,
            data.pricing.currency,
        )
        fields = {
            "name": data.name,
            "description": data.description or "",
            "transport_type": data.transport_type,
            "path": [point.model_dump() for point in data.path],
            "distance": data.distance,
            "duration": data.duration,
            "base_price": pricing.base_price,
            "price_per_station": pricing.price_per_station,
            "currency": pricing.currency,
        }

        route_id = repository.insert_route(fields, station_ids, created_by=admin.admin_id)
        NetworkService.invalidate()

        logger.info(
            f"노선 생성: {data.name} ({route_id}), type={data.transport_type}, "
            f"stations={len(station_ids)} by {admin.email}"
        )
        return RouteService.get_route(route_id)

    @staticmethod
    def update_route(route_id: str, data: RouteUpdateRequest, admin: Admin) -> Route:
        route = RouteService.get_route(route_id)
        ensure_can_modify(route.created_by, admin, "route", "update")

        fields: Dict = data.model_dump(
            exclude_unset=True,
            exclude_none=True,
            exclude={"station_ids", "pricing", "path"},
        )
        if data.path is not None:
            fields["path"] = [point.model_dump() for point in data.path]

        station_ids = None
        if data.station_ids is not None:
            station_ids = RouteService._validate_station_ids(data.station_ids)

        # 교통수단이 바뀌거나 요금이 수정되면 요금 재계산
        # (기존 값 유지 + 요청 값 덮어쓰기 후 metro 여부로 역당 요금 결정)
        effective_type = data.transport_type or route.transport_type
        if data.pricing is not None or effective_type != route.transport_type:
            incoming = data.pricing
            pricing = normalize_pricing(
                effective_type,
                base_price=(
                    incoming.base_price
                    if incoming and incoming.base_price is not None
                    else route.pricing.base_price
                ),
                price_per_station=(
                    incoming.price_per_station
                    if incoming and incoming.price_per_station is not None
                    else route.pricing.price_per_station
                ),
                currency=(
                    incoming.currency
                    if incoming and incoming.currency
                    else route.pricing.currency
                ),
            )
            fields.update(
                {
                    "base_price": pricing.base_price,
                    "price_per_station": pricing.price_per_station,
                    "currency": pricing.currency,
                }
            )

        if not fields and station_ids is None:
            return route

        repository.update_route(route.route_id, fields, station_ids=station_ids)
        NetworkService.invalidate()

        logger.info(f"노선 수정: {route.route_id} fields={sorted(fields)}")
        return RouteService.get_route(route.route_id)

    @staticmethod
    def delete_route(route_id: str, admin: Admin) -> None:
        route = RouteService.get_route(route_id)
        ensure_can_modify(route.created_by, admin, "route", "delete")

        repository.deactivate_route(route.route_id)
        NetworkService.invalidate()
        logger.info(f"노선 삭제(soft): {route.route_id} by {admin.email}")
