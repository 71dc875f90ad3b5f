"""
역 관리 서비스 테스트
app/services/station_service.py
"""

import pytest

from app.core.exceptions import (
    InvalidRequestException,
    NotAuthorizedException,
    StationNotFoundException,
)
from app.models.requests import StationCreateRequest, StationUpdateRequest
from app.services.station_service import StationService
from factories import STATION_A, make_station


@pytest.fixture
def mock_repository(mocker):
    return mocker.patch("app.services.station_service.repository")


@pytest.fixture
def mock_invalidate(mocker):
    return mocker.patch("app.services.station_service.NetworkService.invalidate")


class TestStationQueries:
    def test_list_stations_pagination(self, mock_repository, station_a):
        mock_repository.list_stations.return_value = [station_a]
        mock_repository.count_stations.return_value = 11

        stations, total = StationService.list_stations(page=2, limit=10)

        mock_repository.list_stations.assert_called_once_with(
            active=True, limit=10, offset=10
        )
        assert total == 11
        assert stations == [station_a]

    def test_get_station_invalid_id(self, mock_repository):
        """UUID 형식이 아니면 DB 조회 전에 400"""
        with pytest.raises(InvalidRequestException):
            StationService.get_station("not-a-uuid")

        mock_repository.get_station_by_id.assert_not_called()

    def test_get_station_not_found(self, mock_repository):
        mock_repository.get_station_by_id.return_value = None

        with pytest.raises(StationNotFoundException):
            StationService.get_station(STATION_A)

    def test_get_station_soft_deleted(self, mock_repository):
        mock_repository.get_station_by_id.return_value = make_station(
            STATION_A, "Sadat", is_active=False
        )

        with pytest.raises(StationNotFoundException):
            StationService.get_station(STATION_A)

    def test_list_by_unknown_type(self, mock_repository):
        with pytest.raises(InvalidRequestException) as exc_info:
            StationService.list_stations_by_type("airport")

        assert exc_info.value.status_code == 400


class TestStationWrites:
    def test_create_station_invalidates_cache(self, mock_repository, mock_invalidate, sample_admin, station_a):
        # Given
        mock_repository.insert_station.return_value = station_a
        data = StationCreateRequest(
            name="Sadat",
            stationType="metro",
            location={"lat": 30.04, "lng": 31.23, "address": "Tahrir"},
        )

        # When
        station = StationService.create_station(data, sample_admin)

        # Then
        fields = mock_repository.insert_station.call_args[0][0]
        assert fields["station_type"] == "metro"
        assert fields["lat"] == 30.04
        assert mock_repository.insert_station.call_args[1]["created_by"] == sample_admin.admin_id
        mock_invalidate.assert_called_once()
        assert station is station_a

    def test_update_by_other_admin_forbidden(self, mock_repository, mock_invalidate, other_admin, station_a):
        """다른 관리자가 만든 역은 수정 불가 (403)"""
        mock_repository.get_station_by_id.return_value = station_a

        with pytest.raises(NotAuthorizedException):
            StationService.update_station(
                STATION_A, StationUpdateRequest(name="X"), other_admin
            )

        mock_repository.update_station.assert_not_called()
        mock_invalidate.assert_not_called()

    def test_super_admin_can_update_any_station(self, mock_repository, mock_invalidate, super_admin, station_a):
        mock_repository.get_station_by_id.return_value = station_a
        mock_repository.update_station.return_value = station_a

        StationService.update_station(
            STATION_A, StationUpdateRequest(name="Renamed"), super_admin
        )

        mock_repository.update_station.assert_called_once_with(
            STATION_A, {"name": "Renamed"}
        )
        mock_invalidate.assert_called_once()

    def test_partial_location_update(self, mock_repository, mock_invalidate, sample_admin, station_a):
        """location 일부만 보내면 해당 좌표만 수정"""
        mock_repository.get_station_by_id.return_value = station_a
        mock_repository.update_station.return_value = station_a

        StationService.update_station(
            STATION_A, StationUpdateRequest(location={"lat": 29.9}), sample_admin
        )

        mock_repository.update_station.assert_called_once_with(STATION_A, {"lat": 29.9})

    def test_empty_update_is_noop(self, mock_repository, mock_invalidate, sample_admin, station_a):
        mock_repository.get_station_by_id.return_value = station_a

        result = StationService.update_station(
            STATION_A, StationUpdateRequest(), sample_admin
        )

        assert result is station_a
        mock_repository.update_station.assert_not_called()
        mock_invalidate.assert_not_called()

    def test_delete_is_soft(self, mock_repository, mock_invalidate, sample_admin, station_a):
        mock_repository.get_station_by_id.return_value = station_a

        StationService.delete_station(STATION_A, sample_admin)

        mock_repository.deactivate_station.assert_called_once_with(STATION_A)
        mock_invalidate.assert_called_once()
