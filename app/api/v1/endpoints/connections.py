"""
노선도 연결(tram/metro 라인) 관리 API
"""

from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_admin
from app.models.domain import Admin
from app.models.network import to_envelope
from app.models.requests import ConnectionCreateRequest, ConnectionUpdateRequest
from app.models.responses import connection_to_dict
from app.services.connection_service import ConnectionService

router = APIRouter()


@router.get("")
def list_connections(admin: Admin = Depends(get_current_admin)):
    connections = ConnectionService.list_connections()
    return {
        "success": True,
        "count": len(connections),
        "data": [connection_to_dict(c) for c in connections],
    }


@router.get("/{connection_id}")
def get_connection(connection_id: str, admin: Admin = Depends(get_current_admin)):
    connection = ConnectionService.get_connection(connection_id)
    return to_envelope(connection_to_dict(connection))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_connection(
    connection_data: ConnectionCreateRequest,
    admin: Admin = Depends(get_current_admin),
):
    connection = ConnectionService.create_connection(connection_data, admin)
    return {
        "success": True,
        "message": "Connection created successfully",
        "data": connection_to_dict(connection),
    }


@router.put("/{connection_id}")
def update_connection(
    connection_id: str,
    connection_data: ConnectionUpdateRequest,
    admin: Admin = Depends(get_current_admin),
):
    connection = ConnectionService.update_connection(
        connection_id, connection_data, admin
    )
    return to_envelope(connection_to_dict(connection))


@router.delete("/{connection_id}")
def delete_connection(connection_id: str, admin: Admin = Depends(get_current_admin)):
    ConnectionService.delete_connection(connection_id, admin)
    return {"success": True, "message": "Connection deleted successfully"}
