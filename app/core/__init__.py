"""
Core 설정 및 utilities, 커스텀 예외
"""

from app.core.config import settings

from app.core.exceptions import (
    NetworkAPIException,
    StationNotFoundException,
    RouteNotFoundException,
    ConnectionNotFoundException,
    AdminNotFoundException,
    UserNotFoundException,
    InvalidRequestException,
    AuthenticationException,
    NotAuthorizedException,
)

__all__ = [
    "settings",
    "NetworkAPIException",
    "StationNotFoundException",
    "RouteNotFoundException",
    "ConnectionNotFoundException",
    "AdminNotFoundException",
    "UserNotFoundException",
    "InvalidRequestException",
    "AuthenticationException",
    "NotAuthorizedException",
]
