"""
노선 관리 REST API 엔드포인트
공개 노선망(/metro-network)을 제외한 모든 조회/수정은 관리자 토큰 필요
"""

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_admin
from app.api.v1.endpoints.network import metro_network_response
from app.models.domain import Admin
from app.models.network import to_envelope
from app.models.requests import RouteCreateRequest, RouteUpdateRequest
from app.models.responses import paginated, route_to_dict
from app.services.route_service import RouteService

router = APIRouter()


@router.get("")
def list_routes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: Admin = Depends(get_current_admin),
):
    routes, total = RouteService.list_routes(page, limit)
    return paginated([route_to_dict(r) for r in routes], total, page, limit)


# /{route_id} 보다 먼저 선언해야 "metro-network"가 id로 매칭되지 않음
@router.get("/metro-network")
def get_public_metro_network():
    """
    공개 노선망 조회 (토큰 불필요)

    Returns:
        {"success": true, "data": {"stations", "routes", "interchanges",
                                   "metadata", "statistics"}}
    """
    return metro_network_response("public")


@router.get("/type/{transport_type}")
def list_routes_by_type(transport_type: str, admin: Admin = Depends(get_current_admin)):
    routes = RouteService.list_routes_by_type(transport_type)
    return {
        "success": True,
        "count": len(routes),
        "data": [route_to_dict(r) for r in routes],
    }


@router.get("/{route_id}")
def get_route(route_id: str, admin: Admin = Depends(get_current_admin)):
    return to_envelope(route_to_dict(RouteService.get_route(route_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_route(
    route_data: RouteCreateRequest, admin: Admin = Depends(get_current_admin)
):
    route = RouteService.create_route(route_data, admin)
    return to_envelope(route_to_dict(route))


@router.put("/{route_id}")
def update_route(
    route_id: str,
    route_data: RouteUpdateRequest,
    admin: Admin = Depends(get_current_admin),
):
    route = RouteService.update_route(route_id, route_data, admin)
    return to_envelope(route_to_dict(route))


@router.delete("/{route_id}")
def delete_route(route_id: str, admin: Admin = Depends(get_current_admin)):
    RouteService.delete_route(route_id, admin)
    return {"success": True, "message": "Route deleted successfully"}
