import logging
from typing import Dict, List, Tuple

from app.core.config import STATION_TYPES
from app.core.exceptions import (
    InvalidRequestException,
    StationNotFoundException,
)
from app.db import repository
from app.models.domain import Admin, Station
from app.models.requests import StationCreateRequest, StationUpdateRequest
from app.services.network_service import NetworkService
from app.services.ownership import ensure_can_modify, parse_id

logger = logging.getLogger(__name__)


class StationService:
    @staticmethod
    def list_stations(page: int, limit: int) -> Tuple[List[Station], int]:
        offset = (page - 1) * limit
        stations = repository.list_stations(active=True, limit=limit, offset=offset)
        total = repository.count_stations(active=True)
        return stations, total

    @staticmethod
    def get_station(station_id: str) -> Station:
        station = repository.get_station_by_id(parse_id(station_id, "station"))
        # soft delete된 역은 조회 대상 아님
        if station is None or not station.is_active:
            raise StationNotFoundException()
        return station

    @staticmethod
    def list_stations_by_type(station_type: str) -> List[Station]:
        if station_type not in STATION_TYPES:
            raise InvalidRequestException("Invalid station type")
        return repository.list_stations(station_type=station_type, active=True)

    @staticmethod
    def create_station(data: StationCreateRequest, admin: Admin) -> Station:
        fields = {
            "name": data.name,
            "description": data.description or "",
            "station_type": data.station_type,
            "lat": data.location.lat,
            "lng": data.location.lng,
            "address": data.location.address or "",
            "facilities": data.facilities,
        }
        station = repository.insert_station(fields, created_by=admin.admin_id)
        NetworkService.invalidate()

        logger.info(f"역 생성: {station.name} ({station.station_id}) by {admin.email}")
        return station

    @staticmethod
    def update_station(
        station_id: str, data: StationUpdateRequest, admin: Admin
    ) -> Station:
        station = StationService.get_station(station_id)
        ensure_can_modify(station.created_by, admin, "station", "update")

        fields: Dict = data.model_dump(
            exclude_unset=True, exclude_none=True, exclude={"location"}
        )
        if data.location is not None:
            # 기존 위치에 부분 덮어쓰기
            location = data.location.model_dump(exclude_unset=True, exclude_none=True)
            fields.update(location)

        if not fields:
            return station

        updated = repository.update_station(station.station_id, fields)
        if updated is None:
            raise StationNotFoundException()

        NetworkService.invalidate()
        logger.info(f"역 수정: {updated.station_id} fields={sorted(fields)}")
        return updated

    @staticmethod
    def delete_station(station_id: str, admin: Admin) -> None:
        station = StationService.get_station(station_id)
        ensure_can_modify(station.created_by, admin, "station", "delete")

        repository.deactivate_station(station.station_id)
        NetworkService.invalidate()
        logger.info(f"역 삭제(soft): {station.station_id} by {admin.email}")
