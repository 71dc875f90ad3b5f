"""
노선도 연결(라인) 관리 서비스

연결은 지도에 tram/metro 라인을 그리기 위한 메타데이터(이름, 색상, 역 순서)
노선망 집계 입력이 아니므로 쓰기 후 노선망 캐시를 무효화하지 않음
"""

import logging
from typing import Dict, List

from app.core.exceptions import ConnectionNotFoundException, InvalidRequestException
from app.db import repository
from app.models.domain import Admin, Connection
from app.models.requests import ConnectionCreateRequest, ConnectionUpdateRequest
from app.services.ownership import parse_id

logger = logging.getLogger(__name__)


class ConnectionService:
    @staticmethod
    def _validate_station_ids(station_ids: List[str]) -> List[str]:
        ids = [parse_id(station_id, "station") for station_id in station_ids]

        active_ids = repository.find_active_station_ids(set(ids))
        if any(station_id not in active_ids for station_id in ids):
            raise InvalidRequestException("One or more stations not found")
        return ids

    @staticmethod
    def list_connections() -> List[Connection]:
        return repository.list_connections()

    @staticmethod
    def get_connection(connection_id: str) -> Connection:
        connection = repository.get_connection_by_id(
            parse_id(connection_id, "connection")
        )
        if connection is None:
            raise ConnectionNotFoundException()
        return connection

    @staticmethod
    def create_connection(data: ConnectionCreateRequest, admin: Admin) -> Connection:
        station_ids = ConnectionService._validate_station_ids(data.station_ids)

        fields = {
            "name": data.name,
            "color": data.color,
            "description": data.description or "",
            "connection_type": data.connection_type,
        }
        connection_id = repository.insert_connection(fields, station_ids)

        logger.info(
            f"연결 생성: {data.name} ({connection_id}), type={data.connection_type}, "
            f"stations={len(station_ids)} by {admin.email}"
        )
        return ConnectionService.get_connection(connection_id)

    @staticmethod
    def update_connection(
        connection_id: str, data: ConnectionUpdateRequest, admin: Admin
    ) -> Connection:
        connection = ConnectionService.get_connection(connection_id)

        fields: Dict = data.model_dump(
            exclude_unset=True, exclude_none=True, exclude={"station_ids"}
        )
        station_ids = None
        if data.station_ids is not None:
            station_ids = ConnectionService._validate_station_ids(data.station_ids)

        if not fields and station_ids is None:
            return connection

        repository.update_connection(
            connection.connection_id, fields, station_ids=station_ids
        )
        logger.info(f"연결 수정: {connection.connection_id} by {admin.email}")
        return ConnectionService.get_connection(connection.connection_id)

    @staticmethod
    def delete_connection(connection_id: str, admin: Admin) -> None:
        connection_id = parse_id(connection_id, "connection")
        if not repository.delete_connection(connection_id):
            raise ConnectionNotFoundException()
        logger.info(f"연결 삭제: {connection_id} by {admin.email}")
