"""
관리자 대시보드 API 엔드포인트 테스트
app/api/v1/endpoints/dashboard.py
"""

from unittest.mock import patch

import pytest

from app.core.exceptions import InvalidRequestException, UserNotFoundException
from app.models.domain import Location
from factories import USER_ID


class TestDashboardStats:
    @patch("app.api.v1.endpoints.dashboard.DashboardService.stats")
    def test_stats(self, mock_stats, client, as_admin, sample_user):
        mock_stats.return_value = {
            "total_users": 3,
            "active_users": 2,
            "recent_users": [sample_user],
        }

        response = client.get("/v1/dashboard/stats")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalUsers"] == 3
        assert data["activeUsers"] == 2
        assert data["recentUsers"][0]["email"] == "mona@example.com"

    def test_stats_requires_token(self, client):
        response = client.get("/v1/dashboard/stats")

        assert response.status_code == 401


class TestDashboardUsers:
    @patch("app.api.v1.endpoints.dashboard.DashboardService.list_users")
    def test_list_default_limit(self, mock_list, client, as_admin, sample_user):
        mock_list.return_value = ([sample_user], 1)

        response = client.get("/v1/dashboard/users")

        assert response.json()["pagination"] == {"page": 1, "pages": 1, "limit": 10}
        mock_list.assert_called_once_with(1, 10)

    @patch("app.api.v1.endpoints.dashboard.DashboardService.search_users")
    @patch("app.api.v1.endpoints.dashboard.DashboardService.get_user")
    def test_search_route_not_shadowed(self, mock_get, mock_search, client, as_admin, sample_user):
        """/users/search/{query}가 /users/{user_id}로 잡히지 않음"""
        mock_search.return_value = [sample_user]

        response = client.get("/v1/dashboard/users/search/mona")

        assert response.json()["count"] == 1
        mock_search.assert_called_once_with("mona")
        mock_get.assert_not_called()

    @patch("app.api.v1.endpoints.dashboard.DashboardService.get_user")
    def test_get_not_found(self, mock_get, client, as_admin):
        mock_get.side_effect = UserNotFoundException()

        response = client.get(f"/v1/dashboard/users/{USER_ID}")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "User not found"}

    @patch("app.api.v1.endpoints.dashboard.DashboardService.update_user")
    def test_update(self, mock_update, client, as_admin, sample_user):
        mock_update.return_value = sample_user

        response = client.put(
            f"/v1/dashboard/users/{USER_ID}", json={"isActive": False}
        )

        assert response.status_code == 200
        user_id, data, admin = mock_update.call_args[0]
        assert user_id == USER_ID
        assert data.is_active is False
        assert admin is as_admin

    @patch("app.api.v1.endpoints.dashboard.DashboardService.delete_user")
    def test_delete(self, mock_delete, client, as_admin):
        response = client.delete(f"/v1/dashboard/users/{USER_ID}")

        assert response.json() == {"success": True, "message": "User deleted successfully"}
        mock_delete.assert_called_once_with(USER_ID, as_admin)


class TestNearbyUsers:
    @patch("app.api.v1.endpoints.dashboard.DashboardService.nearby_users")
    def test_nearby_includes_distance(self, mock_nearby, client, as_admin, sample_user):
        # Given
        sample_user.location = Location(lat=30.0, lng=31.0)
        mock_nearby.return_value = [(sample_user, 1234.4)]

        # When
        response = client.get(
            "/v1/dashboard/users/location/nearby?lat=30&lng=31&maxDistance=5000"
        )

        # Then
        assert response.status_code == 200
        item = response.json()["data"][0]
        assert item["distance"] == 1234
        assert item["location"] == {"lat": 30.0, "lng": 31.0}
        mock_nearby.assert_called_once_with(30.0, 31.0, 5000.0)

    @patch("app.api.v1.endpoints.dashboard.DashboardService.nearby_users")
    def test_default_max_distance(self, mock_nearby, client, as_admin):
        mock_nearby.return_value = []

        client.get("/v1/dashboard/users/location/nearby?lat=30&lng=31")

        mock_nearby.assert_called_once_with(30.0, 31.0, 10000)

    @pytest.mark.parametrize("query", ["", "?lat=30", "?lng=31"])
    def test_missing_coordinates(self, client, as_admin, query, mocker):
        mocker.patch(
            "app.api.v1.endpoints.dashboard.DashboardService.nearby_users",
            side_effect=InvalidRequestException("Latitude and longitude are required"),
        )

        response = client.get(f"/v1/dashboard/users/location/nearby{query}")

        assert response.status_code == 400
        assert response.json()["error"] == "Latitude and longitude are required"
