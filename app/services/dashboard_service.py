"""
관리자 대시보드 서비스 (사용자 통계/관리)
"""

import logging
from typing import Dict, List, Optional, Tuple

from app.algorithms.distance_calculator import DistanceCalculator
from app.core.exceptions import InvalidRequestException, UserNotFoundException
from app.db.database import get_db_cursor
from app.models.domain import Admin, Location, User
from app.models.requests import UserAdminUpdateRequest
from app.services.auth_service import USER_COLUMNS, row_to_user
from app.services.ownership import parse_id

logger = logging.getLogger(__name__)

RECENT_USERS_LIMIT = 5
SEARCH_RESULTS_LIMIT = 20
DEFAULT_NEARBY_DISTANCE_M = 10000


def _like_pattern(query: str) -> str:
    # ILIKE 와일드카드 escape 후 부분 일치
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class DashboardService:
    @staticmethod
    def stats() -> Dict:
        with get_db_cursor() as cursor:
            cursor.execute(
                """
                SELECT COUNT(*) AS total_users,
                       COUNT(*) FILTER (WHERE is_active) AS active_users
                FROM users
                """
            )
            counts = cursor.fetchone()

            cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at DESC LIMIT %s",
                (RECENT_USERS_LIMIT,),
            )
            recent = [row_to_user(row) for row in cursor.fetchall()]

        return {
            "total_users": int(counts["total_users"]),
            "active_users": int(counts["active_users"]),
            "recent_users": recent,
        }

    @staticmethod
    def list_users(page: int, limit: int) -> Tuple[List[User], int]:
        with get_db_cursor() as cursor:
            cursor.execute(
                f"""
                SELECT {USER_COLUMNS} FROM users
                ORDER BY created_at DESC
                LIMIT %s OFFSET %s
                """,
                (limit, (page - 1) * limit),
            )
            users = [row_to_user(row) for row in cursor.fetchall()]

            cursor.execute("SELECT COUNT(*) AS total FROM users")
            total = int(cursor.fetchone()["total"])

        return users, total

    @staticmethod
    def get_user(user_id: str) -> User:
        with get_db_cursor() as cursor:
            cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE user_id = %s",
                (parse_id(user_id, "user"),),
            )
            row = cursor.fetchone()

        if not row:
            raise UserNotFoundException()
        return row_to_user(row)

    @staticmethod
    def update_user(user_id: str, data: UserAdminUpdateRequest, admin: Admin) -> User:
        user_id = parse_id(user_id, "user")
        email = data.email.lower() if data.email else None

        with get_db_cursor() as cursor:
            if email is not None:
                cursor.execute(
                    "SELECT 1 FROM users WHERE email = %s AND user_id <> %s",
                    (email, user_id),
                )
                if cursor.fetchone() is not None:
                    raise InvalidRequestException("User with this email already exists")

            cursor.execute(
                f"""
                UPDATE users
                SET name = COALESCE(%s, name),
                    email = COALESCE(%s, email),
                    phone = COALESCE(%s, phone),
                    is_active = COALESCE(%s, is_active)
                WHERE user_id = %s
                RETURNING {USER_COLUMNS}
                """,
                (data.name, email, data.phone, data.is_active, user_id),
            )
            row = cursor.fetchone()

        if not row:
            raise UserNotFoundException()

        logger.info(f"사용자 수정: {row['email']} by {admin.email}")
        return row_to_user(row)

    @staticmethod
    def delete_user(user_id: str, admin: Admin) -> None:
        user_id = parse_id(user_id, "user")
        with get_db_cursor() as cursor:
            cursor.execute("DELETE FROM users WHERE user_id = %s", (user_id,))
            if cursor.rowcount == 0:
                raise UserNotFoundException()
        logger.info(f"사용자 삭제: {user_id} by {admin.email}")

    @staticmethod
    def search_users(query: str) -> List[User]:
        """이름/이메일/전화번호 부분 일치 (대소문자 무시)"""
        pattern = _like_pattern(query.strip())
        with get_db_cursor() as cursor:
            cursor.execute(
                f"""
                SELECT {USER_COLUMNS} FROM users
                WHERE name ILIKE %(pattern)s
                   OR email ILIKE %(pattern)s
                   OR phone ILIKE %(pattern)s
                ORDER BY created_at DESC
                LIMIT %(limit)s
                """,
                {"pattern": pattern, "limit": SEARCH_RESULTS_LIMIT},
            )
            return [row_to_user(row) for row in cursor.fetchall()]

    @staticmethod
    def nearby_users(
        lat: Optional[float],
        lng: Optional[float],
        max_distance: float = DEFAULT_NEARBY_DISTANCE_M,
    ) -> List[Tuple[User, float]]:
        """위치를 공유한 사용자 중 max_distance(m) 이내, 가까운 순"""
        if lat is None or lng is None:
            raise InvalidRequestException("Latitude and longitude are required")

        with get_db_cursor() as cursor:
            cursor.execute(
                f"""
                SELECT {USER_COLUMNS} FROM users
                WHERE lat IS NOT NULL AND lng IS NOT NULL
                """
            )
            users = [row_to_user(row) for row in cursor.fetchall()]

        return DistanceCalculator.within_radius(
            Location(lat=lat, lng=lng),
            users,
            lambda user: user.location,
            max_distance,
        )
