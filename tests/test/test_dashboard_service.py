"""
관리자 대시보드 서비스 테스트
app/services/dashboard_service.py
"""

from datetime import datetime, timezone

import pytest

from app.core.exceptions import InvalidRequestException, UserNotFoundException
from app.models.requests import UserAdminUpdateRequest
from app.services.dashboard_service import DashboardService
from factories import USER_ID


def _user_row(user_id=USER_ID, name="Mona", email="mona@example.com", lat=None, lng=None):
    return {
        "user_id": user_id,
        "name": name,
        "email": email,
        "phone": None,
        "role": "user",
        "is_active": True,
        "is_verified": False,
        "login_attempts": 0,
        "lock_until": None,
        "last_login": None,
        "lat": lat,
        "lng": lng,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def cursor(patch_cursor):
    return patch_cursor("app.services.dashboard_service")


class TestDashboardStats:
    def test_stats(self, cursor):
        # Given
        cursor.fetchone.return_value = {"total_users": 7, "active_users": 5}
        cursor.fetchall.return_value = [_user_row()]

        # When
        stats = DashboardService.stats()

        # Then
        assert stats["total_users"] == 7
        assert stats["active_users"] == 5
        assert [u.user_id for u in stats["recent_users"]] == [USER_ID]
        recent_query, recent_params = cursor.execute.call_args_list[1][0]
        assert recent_params == (5,)

    def test_list_users_offset(self, cursor):
        cursor.fetchall.return_value = [_user_row()]
        cursor.fetchone.return_value = {"total": 21}

        users, total = DashboardService.list_users(page=3, limit=10)

        assert total == 21
        assert len(users) == 1
        assert cursor.execute.call_args_list[0][0][1] == (10, 20)


class TestDashboardUsers:
    def test_get_user_invalid_id(self, cursor):
        with pytest.raises(InvalidRequestException) as exc_info:
            DashboardService.get_user("42")

        assert exc_info.value.message == "Invalid user id"
        cursor.execute.assert_not_called()

    def test_get_user_not_found(self, cursor):
        with pytest.raises(UserNotFoundException):
            DashboardService.get_user(USER_ID)

    def test_update_user_duplicate_email(self, cursor, sample_admin):
        cursor.fetchone.return_value = {"?column?": 1}

        with pytest.raises(InvalidRequestException) as exc_info:
            DashboardService.update_user(
                USER_ID, UserAdminUpdateRequest(email="Taken@Example.com"), sample_admin
            )

        assert exc_info.value.message == "User with this email already exists"
        assert cursor.execute.call_args[0][1] == ("taken@example.com", USER_ID)

    def test_deactivate_user(self, cursor, sample_admin):
        row = _user_row()
        row["is_active"] = False
        cursor.fetchone.return_value = row

        user = DashboardService.update_user(
            USER_ID, UserAdminUpdateRequest(isActive=False), sample_admin
        )

        assert user.is_active is False
        # email 미지정 => 중복 검사 없이 UPDATE 1회
        assert cursor.execute.call_count == 1
        assert cursor.execute.call_args[0][1] == (None, None, None, False, USER_ID)

    def test_delete_missing_user(self, cursor, sample_admin):
        cursor.rowcount = 0

        with pytest.raises(UserNotFoundException):
            DashboardService.delete_user(USER_ID, sample_admin)

    def test_search_escapes_wildcards(self, cursor):
        DashboardService.search_users(" 50%_off ")

        params = cursor.execute.call_args[0][1]
        assert params == {"pattern": "%50\\%\\_off%", "limit": 20}


class TestNearbyUsers:
    def test_requires_coordinates(self, cursor):
        with pytest.raises(InvalidRequestException) as exc_info:
            DashboardService.nearby_users(30.0, None)

        assert exc_info.value.message == "Latitude and longitude are required"
        cursor.execute.assert_not_called()

    def test_filters_by_distance_and_sorts(self, cursor):
        # Given: 약 1.1km, 약 111km 떨어진 사용자
        near = _user_row("55555555-5555-5555-5555-555555555555", "Near", "n@x.com", 30.01, 31.0)
        far = _user_row("66666666-6666-6666-6666-666666666666", "Far", "f@x.com", 31.0, 31.0)
        nearest = _user_row(USER_ID, "Here", "h@x.com", 30.0, 31.0)
        cursor.fetchall.return_value = [near, far, nearest]

        # When
        found = DashboardService.nearby_users(30.0, 31.0, 10000)

        # Then
        assert [user.name for user, _ in found] == ["Here", "Near"]
        assert found[0][1] == pytest.approx(0.0)
        assert found[1][1] == pytest.approx(1112, abs=5)
