"""
pydantic models for 요청, 응답, 노선망 뷰, 도메인 객체
"""


from app.models.requests import (
    StationCreateRequest,
    StationUpdateRequest,
    RouteCreateRequest,
    RouteUpdateRequest,
    AdminLoginRequest,
    UserRegisterRequest,
    UserLoginRequest,
    ConnectionCreateRequest,
    ConnectionUpdateRequest,
)
from app.models.responses import ErrorResponse
from app.models.network import NetworkView
from app.models.domain import (
    Station,
    StationRef,
    Route,
    Pricing,
    Location,
    Admin,
    User,
    Connection,
)

__all__ = [
    "StationCreateRequest",
    "StationUpdateRequest",
    "RouteCreateRequest",
    "RouteUpdateRequest",
    "AdminLoginRequest",
    "UserRegisterRequest",
    "UserLoginRequest",
    "ConnectionCreateRequest",
    "ConnectionUpdateRequest",
    "ErrorResponse",
    "NetworkView",
    "Station",
    "StationRef",
    "Route",
    "Pricing",
    "Location",
    "Admin",
    "User",
    "Connection",
]
