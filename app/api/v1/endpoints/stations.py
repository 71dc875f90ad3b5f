"""
역 관리 REST API 엔드포인트
조회/생성/수정/삭제 모두 관리자 토큰 필요

psycopg2 호출이 동기 방식이므로 핸들러는 일반 def로 선언
(FastAPI가 threadpool에서 실행 => 이벤트 루프를 막지 않음)
"""

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_admin
from app.models.domain import Admin
from app.models.network import to_envelope
from app.models.requests import StationCreateRequest, StationUpdateRequest
from app.models.responses import paginated, station_to_dict
from app.services.station_service import StationService

router = APIRouter()

DEFAULT_PAGE_SIZE = 50


@router.get("")
def list_stations(
    page: int = Query(1, ge=1, description="페이지 번호"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100, description="페이지 크기"),
    admin: Admin = Depends(get_current_admin),
):
    """
    활성 역 목록 (최신순)

    Example:
        GET /v1/stations?page=1&limit=50
    """
    stations, total = StationService.list_stations(page, limit)
    return paginated([station_to_dict(s) for s in stations], total, page, limit)


@router.get("/type/{station_type}")
def list_stations_by_type(station_type: str, admin: Admin = Depends(get_current_admin)):
    stations = StationService.list_stations_by_type(station_type)
    return {
        "success": True,
        "count": len(stations),
        "data": [station_to_dict(s) for s in stations],
    }


@router.get("/{station_id}")
def get_station(station_id: str, admin: Admin = Depends(get_current_admin)):
    return to_envelope(station_to_dict(StationService.get_station(station_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_station(
    station_data: StationCreateRequest, admin: Admin = Depends(get_current_admin)
):
    station = StationService.create_station(station_data, admin)
    return to_envelope(station_to_dict(station))


@router.put("/{station_id}")
def update_station(
    station_id: str,
    station_data: StationUpdateRequest,
    admin: Admin = Depends(get_current_admin),
):
    station = StationService.update_station(station_id, station_data, admin)
    return to_envelope(station_to_dict(station))


@router.delete("/{station_id}")
def delete_station(station_id: str, admin: Admin = Depends(get_current_admin)):
    StationService.delete_station(station_id, admin)
    return {"success": True, "message": "Station deleted successfully"}
