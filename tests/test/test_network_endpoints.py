"""
노선망 조회 엔드포인트 테스트
GET /v1/routes/metro-network (공개)
GET /v1/users/metro-network (사용자)
GET /v1/admin/metro-network (관리자)
"""

import asyncio
import time
from unittest.mock import patch

import pytest

from app.algorithms.network_aggregator import build_network_view

NETWORK_PATHS = [
    "/v1/routes/metro-network",
    "/v1/users/metro-network",
    "/v1/admin/metro-network",
]


@pytest.fixture
def network_view(station_a, station_b, station_c, sample_route):
    return build_network_view([station_a, station_b, station_c], [sample_route])


@pytest.fixture
def authenticated(as_admin, as_user):
    """관리자/사용자 의존성 모두 통과"""
    return None


class TestMetroNetworkEndpoints:
    @pytest.mark.parametrize("path", NETWORK_PATHS)
    @patch("app.api.v1.endpoints.network.NetworkService.get_network_view")
    def test_same_envelope_for_every_caller(self, mock_get_view, path, client, authenticated, network_view):
        """세 엔드포인트 모두 같은 집계 결과를 반환"""
        # Given
        mock_get_view.return_value = network_view

        # When
        response = client.get(path)

        # Then
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["metadata"]["totalStations"] == 3
        assert body["data"]["metadata"]["totalConnections"] == 2
        assert body["data"]["statistics"]["averageRouteLength"] == 10
        assert body["data"]["interchanges"] == []
        mock_get_view.assert_called_once_with("metro")

    @pytest.mark.parametrize("path", NETWORK_PATHS)
    @patch("app.api.v1.endpoints.network.NetworkService.get_network_view")
    def test_failure_is_generic_server_error(self, mock_get_view, path, client, authenticated):
        """저장소 장애 => 500 {success: false, error: "Server error"}"""
        mock_get_view.side_effect = RuntimeError("connection refused")

        response = client.get(path)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Server error"}

    @pytest.mark.parametrize("path", NETWORK_PATHS[1:])
    @patch("app.api.v1.endpoints.network.NetworkService.get_network_view")
    def test_authenticated_paths_require_token(self, mock_get_view, path, client):
        response = client.get(path)

        assert response.status_code == 401
        assert response.json()["success"] is False
        mock_get_view.assert_not_called()

    @patch("app.api.v1.endpoints.network.NetworkService.get_network_view")
    def test_public_path_needs_no_token(self, mock_get_view, client, network_view):
        mock_get_view.return_value = network_view

        assert client.get("/v1/routes/metro-network").status_code == 200

    @patch("app.api.deps.AuthService.get_admin_by_id")
    @patch("app.api.v1.endpoints.network.NetworkService.get_network_view")
    def test_admin_cookie_token(self, mock_get_view, mock_get_admin, client, sample_admin, admin_token, network_view):
        """대시보드는 token 쿠키로 인증"""
        mock_get_view.return_value = network_view
        mock_get_admin.return_value = sample_admin
        client.cookies.set("token", admin_token)

        response = client.get("/v1/admin/metro-network")

        assert response.status_code == 200

    @patch("app.api.deps.AuthService.get_user_by_id")
    @patch("app.api.v1.endpoints.network.NetworkService.get_network_view")
    def test_user_bearer_token(self, mock_get_view, mock_get_user, client, sample_user, user_token, network_view):
        mock_get_view.return_value = network_view
        mock_get_user.return_value = sample_user

        response = client.get(
            "/v1/users/metro-network",
            headers={"Authorization": f"Bearer {user_token}"},
        )

        assert response.status_code == 200


class TestConcurrentRequests:
    """동기 저장소 조회가 이벤트 루프를 막지 않는지 (threadpool 실행)"""

    async def test_slow_fetches_overlap(self, mocker, network_view):
        # Given: 저장소 조회 1회에 0.5초
        import httpx
        from app.main import app

        def slow_view(transport_type):
            time.sleep(0.5)
            return network_view

        mocker.patch(
            "app.api.v1.endpoints.network.NetworkService.get_network_view",
            side_effect=slow_view,
        )

        # When: 동시에 2건 요청
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            started = time.perf_counter()
            responses = await asyncio.gather(
                ac.get("/v1/routes/metro-network"),
                ac.get("/v1/routes/metro-network"),
            )
            elapsed = time.perf_counter() - started

        # Then: 순차 실행(1.0초)보다 확실히 빠름
        assert [r.status_code for r in responses] == [200, 200]
        assert elapsed < 0.9
