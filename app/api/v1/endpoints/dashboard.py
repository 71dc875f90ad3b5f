"""
관리자 대시보드 API (사용자 통계, 사용자 관리)

/users/search, /users/location 경로는 /users/{user_id}보다 먼저 선언
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_admin
from app.models.domain import Admin
from app.models.network import to_envelope
from app.models.requests import UserAdminUpdateRequest
from app.models.responses import paginated, user_to_dict
from app.services.dashboard_service import DEFAULT_NEARBY_DISTANCE_M, DashboardService

router = APIRouter()


@router.get("/stats")
def get_stats(admin: Admin = Depends(get_current_admin)):
    stats = DashboardService.stats()
    return to_envelope(
        {
            "totalUsers": stats["total_users"],
            "activeUsers": stats["active_users"],
            "recentUsers": [user_to_dict(u) for u in stats["recent_users"]],
        }
    )


@router.get("/users")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: Admin = Depends(get_current_admin),
):
    users, total = DashboardService.list_users(page, limit)
    return paginated([user_to_dict(u) for u in users], total, page, limit)


@router.get("/users/search/{query}")
def search_users(query: str, admin: Admin = Depends(get_current_admin)):
    users = DashboardService.search_users(query)
    return {
        "success": True,
        "count": len(users),
        "data": [user_to_dict(u) for u in users],
    }


@router.get("/users/location/nearby")
def nearby_users(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    max_distance: float = Query(
        DEFAULT_NEARBY_DISTANCE_M, gt=0, alias="maxDistance", description="meters"
    ),
    admin: Admin = Depends(get_current_admin),
):
    """
    Example:
        GET /v1/dashboard/users/location/nearby?lat=30.04&lng=31.23&maxDistance=5000
    """
    found = DashboardService.nearby_users(lat, lng, max_distance)
    return {
        "success": True,
        "count": len(found),
        "data": [
            {**user_to_dict(user), "distance": round(distance)}
            for user, distance in found
        ],
    }


@router.get("/users/{user_id}")
def get_user(user_id: str, admin: Admin = Depends(get_current_admin)):
    return to_envelope(user_to_dict(DashboardService.get_user(user_id)))


@router.put("/users/{user_id}")
def update_user(
    user_id: str,
    user_data: UserAdminUpdateRequest,
    admin: Admin = Depends(get_current_admin),
):
    user = DashboardService.update_user(user_id, user_data, admin)
    return to_envelope(user_to_dict(user))


@router.delete("/users/{user_id}")
def delete_user(user_id: str, admin: Admin = Depends(get_current_admin)):
    DashboardService.delete_user(user_id, admin)
    return {"success": True, "message": "User deleted successfully"}
