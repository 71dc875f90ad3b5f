"""
노선망 서비스 테스트
app/services/network_service.py (저장소/Redis는 Mock)
"""

from unittest.mock import patch

import pytest

from app.algorithms.network_aggregator import build_network_view
from app.services.network_service import NetworkService


@pytest.fixture
def mock_repository(mocker, station_a, station_b, station_c, sample_route):
    repo = mocker.patch("app.services.network_service.repository")
    repo.list_stations.return_value = [station_a, station_b, station_c]
    repo.list_routes.return_value = [sample_route]
    return repo


@pytest.fixture
def mock_cache(mocker):
    cache = mocker.MagicMock()
    cache.current_version.return_value = 5
    cache.get.return_value = None
    mocker.patch("app.services.network_service.init_redis", return_value=cache)
    return cache


@pytest.fixture
def cache_enabled():
    with patch("app.services.network_service.settings.ENABLE_NETWORK_CACHE", True):
        yield


@pytest.fixture
def cache_disabled():
    with patch("app.services.network_service.settings.ENABLE_NETWORK_CACHE", False):
        yield


class TestLoadAndBuild:
    def test_metro_uses_metro_stations_only(self, mock_repository):
        """metro 노선망은 metro 역만 집계"""
        view = NetworkService.load_and_build("metro")

        mock_repository.list_stations.assert_called_once_with(
            station_type="metro", active=True
        )
        mock_repository.list_routes.assert_called_once_with(
            transport_type="metro", active=True
        )
        assert view.metadata.total_stations == 3
        assert view.metadata.total_connections == 2

    def test_other_transport_uses_all_active_stations(self, mock_repository):
        NetworkService.load_and_build("bus")

        mock_repository.list_stations.assert_called_once_with(
            station_type=None, active=True
        )

    def test_repository_failure_propagates(self, mock_repository):
        mock_repository.list_routes.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            NetworkService.load_and_build("metro")


class TestGetNetworkView:
    def test_cache_hit_skips_repository(self, cache_enabled, mock_repository, mock_cache, station_a, sample_route):
        # Given
        cached_view = build_network_view([station_a], [sample_route])
        mock_cache.get.return_value = cached_view

        # When
        view = NetworkService.get_network_view("metro")

        # Then
        assert view is cached_view
        mock_cache.get.assert_called_once_with("metro", 5)
        mock_repository.list_routes.assert_not_called()

    def test_cache_miss_builds_and_stores_under_read_version(self, cache_enabled, mock_repository, mock_cache):
        """집계 전에 읽은 version으로 저장 (집계 중 쓰기가 있어도 새 version에 저장되지 않음)"""
        view = NetworkService.get_network_view("metro")

        mock_cache.set.assert_called_once_with("metro", 5, view)

    def test_redis_unavailable_builds_without_caching(self, cache_enabled, mock_repository, mock_cache):
        mock_cache.current_version.return_value = None

        view = NetworkService.get_network_view("metro")

        assert view.metadata.total_routes == 1
        mock_cache.get.assert_not_called()
        mock_cache.set.assert_not_called()

    def test_cache_disabled(self, cache_disabled, mock_repository, mock_cache):
        NetworkService.get_network_view("metro")

        mock_cache.current_version.assert_not_called()
        mock_repository.list_routes.assert_called_once()


class TestInvalidate:
    def test_invalidate_bumps_version(self, cache_enabled, mock_cache):
        NetworkService.invalidate()

        mock_cache.invalidate.assert_called_once()

    def test_invalidate_noop_when_disabled(self, cache_disabled, mock_cache):
        NetworkService.invalidate()

        mock_cache.invalidate.assert_not_called()
