"""
Pytest 설정 및 공통 Fixture
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# 테스트 모드 환경 변수 설정 (settings 임포트 전에 설정해야 함)
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENABLE_PERFORMANCE_MONITORING", "true")

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.models.domain import Admin, User  # noqa: E402
from factories import (  # noqa: E402
    ADMIN_ID,
    OTHER_ADMIN_ID,
    SUPER_ADMIN_ID,
    USER_ID,
    STATION_A,
    STATION_B,
    STATION_C,
    STATION_D,
    ROUTE_1,
    make_route,
    make_station,
)


@pytest.fixture
def station_a():
    return make_station(STATION_A, "Sadat", 0, 0)


@pytest.fixture
def station_b():
    return make_station(STATION_B, "Nasser", 0, 1)


@pytest.fixture
def station_c():
    return make_station(STATION_C, "Orabi", 0, 2)


@pytest.fixture
def station_d():
    return make_station(STATION_D, "Attaba", 1, 1)


@pytest.fixture
def sample_route(station_a, station_b, station_c):
    """A-B-C 단일 metro 노선 (distance=10, basePrice=5)"""
    return make_route(ROUTE_1, "Line 1", [station_a, station_b, station_c], distance=10)


@pytest.fixture
def sample_admin():
    return Admin(admin_id=ADMIN_ID, name="Admin", email="admin@example.com")


@pytest.fixture
def other_admin():
    return Admin(admin_id=OTHER_ADMIN_ID, name="Other", email="other@example.com")


@pytest.fixture
def super_admin():
    return Admin(
        admin_id=SUPER_ADMIN_ID,
        name="Root",
        email="root@example.com",
        role="super_admin",
    )


@pytest.fixture
def sample_user():
    return User(
        user_id=USER_ID,
        name="Mona",
        email="mona@example.com",
        phone="+201000000000",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def mock_cursor(mocker):
    """get_db_cursor() 컨텍스트 매니저가 반환하는 Mock cursor"""
    cursor = mocker.MagicMock()
    cursor.fetchone.return_value = None
    cursor.fetchall.return_value = []
    return cursor


@pytest.fixture
def patch_cursor(mocker, mock_cursor):
    """
    모듈 경로를 받아 그 모듈의 get_db_cursor를 mock_cursor로 대체
    사용: patch_cursor("app.db.repository")
    """

    def _patch(module_path: str):
        cursor_cm = mocker.MagicMock()
        cursor_cm.__enter__.return_value = mock_cursor
        cursor_cm.__exit__.return_value = False
        mocker.patch(f"{module_path}.get_db_cursor", return_value=cursor_cm)
        return mock_cursor

    return _patch


@pytest.fixture
def mock_redis_client(mocker):
    """Mock Redis 클라이언트"""
    mock = mocker.MagicMock()
    mock.get.return_value = None
    mock.setex.return_value = True
    mock.incr.return_value = 1
    return mock


@pytest.fixture
def client():
    """
    FastAPI TestClient
    with 블록 없이 생성 => lifespan(DB 풀/Redis 초기화) 실행 안 함
    """
    from fastapi.testclient import TestClient
    from app.main import app

    return TestClient(app)


@pytest.fixture
def admin_token(sample_admin):
    from app.auth.security import create_access_token, ADMIN_ACTOR

    return create_access_token(
        sample_admin.admin_id, actor=ADMIN_ACTOR, role=sample_admin.role
    )


@pytest.fixture
def user_token(sample_user):
    from app.auth.security import create_access_token, USER_ACTOR

    return create_access_token(sample_user.user_id, actor=USER_ACTOR)


@pytest.fixture
def as_admin(sample_admin):
    """get_current_admin 의존성을 sample_admin으로 대체"""
    from app.main import app
    from app.api.deps import get_current_admin

    app.dependency_overrides[get_current_admin] = lambda: sample_admin
    yield sample_admin
    app.dependency_overrides.pop(get_current_admin, None)


@pytest.fixture
def as_super_admin(super_admin):
    from app.main import app
    from app.api.deps import get_current_admin

    app.dependency_overrides[get_current_admin] = lambda: super_admin
    yield super_admin
    app.dependency_overrides.pop(get_current_admin, None)


@pytest.fixture
def as_user(sample_user):
    from app.main import app
    from app.api.deps import get_current_user

    app.dependency_overrides[get_current_user] = lambda: sample_user
    yield sample_user
    app.dependency_overrides.pop(get_current_user, None)
