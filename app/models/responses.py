from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

from app.models.domain import Admin, Connection, Route, Station, StationRef, User

# service 별 응답 구조 정의
# 모든 응답은 {"success": bool, ...} envelope 사용


# 에러 응답
class ErrorResponse(BaseModel):
    success: bool = Field(default=False)
    error: str = Field(..., description="에러 메시지")


class Pagination(BaseModel):
    page: int
    pages: int
    limit: int


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def station_to_dict(station: Station) -> Dict[str, Any]:
    return {
        "id": station.station_id,
        "name": station.name,
        "description": station.description,
        "stationType": station.station_type,
        "location": {
            "lat": station.location.lat,
            "lng": station.location.lng,
            "address": station.location.address,
        },
        "facilities": station.facilities,
        "isActive": station.is_active,
        "createdBy": station.created_by,
        "createdAt": _iso(station.created_at),
        "updatedAt": _iso(station.updated_at),
    }


def station_ref_to_dict(station: StationRef) -> Dict[str, Any]:
    return {
        "id": station.station_id,
        "name": station.name,
        "stationType": station.station_type,
        "location": {"lat": station.location.lat, "lng": station.location.lng},
    }


def route_to_dict(route: Route) -> Dict[str, Any]:
    return {
        "id": route.route_id,
        "name": route.name,
        "description": route.description,
        "transportType": route.transport_type,
        "stations": [station_ref_to_dict(s) for s in route.stations],
        "path": route.path,
        "distance": route.distance,
        "duration": route.duration,
        "pricing": {
            "basePrice": route.pricing.base_price,
            "pricePerStation": route.pricing.price_per_station,
            "currency": route.pricing.currency,
        },
        "isActive": route.is_active,
        "createdBy": route.created_by,
        "createdAt": _iso(route.created_at),
        "updatedAt": _iso(route.updated_at),
    }


# password/잠금 관련 필드는 응답에 포함하지 않음
def admin_to_dict(admin: Admin) -> Dict[str, Any]:
    return {
        "id": admin.admin_id,
        "name": admin.name,
        "email": admin.email,
        "role": admin.role,
        "isActive": admin.is_active,
        "lastLogin": _iso(admin.last_login),
        "createdAt": _iso(admin.created_at),
    }


def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": user.user_id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
        "isActive": user.is_active,
        "isVerified": user.is_verified,
        "location": (
            {"lat": user.location.lat, "lng": user.location.lng}
            if user.location
            else None
        ),
        "lastLogin": _iso(user.last_login),
        "createdAt": _iso(user.created_at),
    }


# 기존 대시보드 호환: type, stationsId(역 정보로 populate) 키 유지
def connection_to_dict(connection: Connection) -> Dict[str, Any]:
    return {
        "id": connection.connection_id,
        "name": connection.name,
        "color": connection.color,
        "description": connection.description,
        "type": connection.connection_type,
        "stationsId": [station_ref_to_dict(s) for s in connection.stations],
        "createdAt": _iso(connection.created_at),
        "updatedAt": _iso(connection.updated_at),
    }


def paginated(items: List[Dict], total: int, page: int, limit: int) -> Dict[str, Any]:
    pages = (total + limit - 1) // limit if limit else 0
    return {
        "success": True,
        "count": len(items),
        "total": total,
        "pagination": Pagination(page=page, pages=pages, limit=limit).model_dump(),
        "data": items,
    }
