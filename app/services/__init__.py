"""
Business logic services
"""

from app.services.network_service import NetworkService
from app.services.station_service import StationService
from app.services.route_service import RouteService
from app.services.auth_service import AuthService
from app.services.connection_service import ConnectionService
from app.services.dashboard_service import DashboardService

__all__ = [
    "NetworkService",
    "StationService",
    "RouteService",
    "AuthService",
    "ConnectionService",
    "DashboardService",
]
