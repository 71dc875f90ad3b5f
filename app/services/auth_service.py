from datetime import datetime, timezone, timedelta
from typing import Dict, List, Optional, Tuple
import logging

from psycopg2 import sql

from app.models.domain import Admin, Location, User
from app.auth.security import verify_password, get_password_hash
from app.db.database import get_db_cursor
from app.core.config import settings
from app.core.exceptions import (
    AdminNotFoundException,
    AuthenticationException,
    InvalidRequestException,
)

logger = logging.getLogger(__name__)


_ADMIN_COLUMNS = """
    admin_id, name, email, role, is_active, login_attempts, lock_until,
    last_login, created_at
"""

USER_COLUMNS = """
    user_id, name, email, phone, role, is_active, is_verified, login_attempts,
    lock_until, last_login, lat, lng, created_at
"""


def _row_to_admin(row: Dict) -> Admin:
    return Admin(
        admin_id=str(row["admin_id"]),
        name=row["name"],
        email=row["email"],
        role=row["role"],
        is_active=row["is_active"],
        login_attempts=row.get("login_attempts") or 0,
        lock_until=row.get("lock_until"),
        last_login=row.get("last_login"),
        created_at=row.get("created_at"),
    )


def row_to_user(row: Dict) -> User:
    return User(
        user_id=str(row["user_id"]),
        name=row["name"],
        email=row["email"],
        phone=row.get("phone"),
        role=row.get("role") or "user",
        is_active=row["is_active"],
        is_verified=row.get("is_verified", False),
        login_attempts=row.get("login_attempts") or 0,
        lock_until=row.get("lock_until"),
        last_login=row.get("last_login"),
        created_at=row.get("created_at"),
        location=(
            Location(lat=float(row["lat"]), lng=float(row["lng"]))
            if row.get("lat") is not None and row.get("lng") is not None
            else None
        ),
    )


def next_lock_state(
    login_attempts: int,
    lock_until: Optional[datetime],
    now: datetime,
    max_attempts: int,
    lock_minutes: int,
) -> Tuple[int, Optional[datetime]]:
    """
    로그인 실패 1회 반영 후 (login_attempts, lock_until) 계산

    - 이전 잠금이 이미 만료됐으면 1부터 다시 카운트
    - max_attempts 도달 시 lock_minutes 동안 잠금
    """
    if lock_until is not None and lock_until <= now:
        return 1, None

    attempts = login_attempts + 1
    is_locked = lock_until is not None and lock_until > now
    if attempts >= max_attempts and not is_locked:
        return attempts, now + timedelta(minutes=lock_minutes)

    return attempts, lock_until


def _record_failed_login(table: str, id_column: str, record_id: str, state: Tuple):
    attempts, lock_until = state
    query = sql.SQL(
        "UPDATE {} SET login_attempts = %s, lock_until = %s WHERE {} = %s"
    ).format(sql.Identifier(table), sql.Identifier(id_column))

    with get_db_cursor() as cursor:
        cursor.execute(query, (attempts, lock_until, record_id))


def _record_successful_login(table: str, id_column: str, record_id: str):
    # 성공 시 실패 횟수/잠금 초기화 + 마지막 로그인 시각
    query = sql.SQL(
        "UPDATE {} SET login_attempts = 0, lock_until = NULL, last_login = NOW() "
        "WHERE {} = %s"
    ).format(sql.Identifier(table), sql.Identifier(id_column))

    with get_db_cursor() as cursor:
        cursor.execute(query, (record_id,))


class AuthService:
    # ========== 관리자 ==========

    @staticmethod
    def _get_admin_with_hash(email: str) -> Optional[Tuple[Admin, str]]:
        with get_db_cursor() as cursor:
            cursor.execute(
                f"SELECT {_ADMIN_COLUMNS}, password_hash FROM admins WHERE email = %s",
                (email.lower(),),
            )
            row = cursor.fetchone()
            if not row:
                return None
            return _row_to_admin(row), row["password_hash"]

    @staticmethod
    def get_admin_by_id(admin_id: str) -> Optional[Admin]:
        with get_db_cursor() as cursor:
            cursor.execute(
                f"SELECT {_ADMIN_COLUMNS} FROM admins WHERE admin_id = %s",
                (admin_id,),
            )
            row = cursor.fetchone()
            return _row_to_admin(row) if row else None

    @staticmethod
    def authenticate_admin(email: str, password: str) -> Admin:
        found = AuthService._get_admin_with_hash(email)
        if not found:
            raise AuthenticationException("Invalid credentials")

        admin, password_hash = found

        if not admin.is_active:
            raise AuthenticationException("Admin account is deactivated")

        if admin.is_locked:
            raise AuthenticationException(
                "Account is locked due to multiple failed login attempts. "
                "Please try again later."
            )

        if not verify_password(password, password_hash):
            state = next_lock_state(
                admin.login_attempts,
                admin.lock_until,
                datetime.now(timezone.utc),
                settings.ADMIN_MAX_LOGIN_ATTEMPTS,
                settings.ADMIN_LOCK_MINUTES,
            )
            _record_failed_login("admins", "admin_id", admin.admin_id, state)
            logger.warning(f"관리자 로그인 실패: {admin.email}, attempts={state[0]}")
            raise AuthenticationException("Invalid credentials")

        _record_successful_login("admins", "admin_id", admin.admin_id)
        admin.login_attempts = 0
        admin.lock_until = None
        admin.last_login = datetime.now(timezone.utc)
        return admin

    @staticmethod
    def admin_email_exists(email: str) -> bool:
        with get_db_cursor() as cursor:
            cursor.execute("SELECT 1 FROM admins WHERE email = %s", (email.lower(),))
            return cursor.fetchone() is not None

    @staticmethod
    def create_admin(name: str, email: str, password: str, role: str = "admin") -> Admin:
        if AuthService.admin_email_exists(email):
            raise InvalidRequestException("Admin with this email already exists")

        with get_db_cursor() as cursor:
            cursor.execute(
                f"""
                INSERT INTO admins (name, email, password_hash, role)
                VALUES (%s, %s, %s, %s)
                RETURNING {_ADMIN_COLUMNS}
                """,
                (name, email.lower(), get_password_hash(password), role),
            )
            return _row_to_admin(cursor.fetchone())

    @staticmethod
    def list_admins() -> List[Admin]:
        with get_db_cursor() as cursor:
            cursor.execute(
                f"SELECT {_ADMIN_COLUMNS} FROM admins ORDER BY created_at DESC"
            )
            return [_row_to_admin(row) for row in cursor.fetchall()]

    @staticmethod
    def update_admin(
        admin_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Admin:
        """super_admin 전용, None 필드는 기존 값 유지"""
        email = email.lower() if email else None

        with get_db_cursor() as cursor:
            if email is not None:
                cursor.execute(
                    "SELECT 1 FROM admins WHERE email = %s AND admin_id <> %s",
                    (email, admin_id),
                )
                if cursor.fetchone() is not None:
                    raise InvalidRequestException("Admin with this email already exists")

            cursor.execute(
                f"""
                UPDATE admins
                SET name = COALESCE(%s, name),
                    email = COALESCE(%s, email),
                    role = COALESCE(%s, role),
                    is_active = COALESCE(%s, is_active)
                WHERE admin_id = %s
                RETURNING {_ADMIN_COLUMNS}
                """,
                (name, email, role, is_active, admin_id),
            )
            row = cursor.fetchone()

        if not row:
            raise AdminNotFoundException()
        return _row_to_admin(row)

    @staticmethod
    def delete_admin(admin_id: str) -> None:
        """
        hard delete
        작성한 역/노선의 created_by는 NULL이 됨 (이후 super_admin만 수정 가능)
        """
        with get_db_cursor() as cursor:
            cursor.execute("DELETE FROM admins WHERE admin_id = %s", (admin_id,))
            if cursor.rowcount == 0:
                raise AdminNotFoundException()

    # ========== 사용자 ==========

    @staticmethod
    def _get_user_with_hash(email: str) -> Optional[Tuple[User, str]]:
        with get_db_cursor() as cursor:
            cursor.execute(
                f"SELECT {USER_COLUMNS}, password_hash FROM users WHERE email = %s",
                (email.lower(),),
            )
            row = cursor.fetchone()
            if not row:
                return None
            return row_to_user(row), row["password_hash"]

    @staticmethod
    def user_email_exists(email: str) -> bool:
        with get_db_cursor() as cursor:
            cursor.execute("SELECT 1 FROM users WHERE email = %s", (email.lower(),))
            return cursor.fetchone() is not None

    @staticmethod
    def register_user(
        name: str, email: str, password: str, phone: Optional[str] = None
    ) -> User:
        if AuthService.user_email_exists(email):
            raise InvalidRequestException("User with this email already exists")

        # 빈 문자열 전화번호는 저장하지 않음
        phone = phone.strip() if phone and phone.strip() else None

        with get_db_cursor() as cursor:
            cursor.execute(
                f"""
                INSERT INTO users (name, email, password_hash, phone)
                VALUES (%s, %s, %s, %s)
                RETURNING {USER_COLUMNS}
                """,
                (name, email.lower(), get_password_hash(password), phone),
            )
            return row_to_user(cursor.fetchone())

    @staticmethod
    def authenticate_user(email: str, password: str) -> User:
        found = AuthService._get_user_with_hash(email)
        if not found:
            raise AuthenticationException("Invalid credentials")

        user, password_hash = found

        if not user.is_active:
            raise AuthenticationException("User account is deactivated")

        if user.is_locked:
            raise AuthenticationException(
                "Account is locked due to multiple failed login attempts. "
                "Please try again later."
            )

        if not verify_password(password, password_hash):
            state = next_lock_state(
                user.login_attempts,
                user.lock_until,
                datetime.now(timezone.utc),
                settings.USER_MAX_LOGIN_ATTEMPTS,
                settings.USER_LOCK_MINUTES,
            )
            _record_failed_login("users", "user_id", user.user_id, state)
            logger.warning(f"사용자 로그인 실패: {user.email}, attempts={state[0]}")
            raise AuthenticationException("Invalid credentials")

        _record_successful_login("users", "user_id", user.user_id)
        user.login_attempts = 0
        user.lock_until = None
        user.last_login = datetime.now(timezone.utc)
        return user

    @staticmethod
    def get_user_by_id(user_id: str) -> Optional[User]:
        with get_db_cursor() as cursor:
            cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE user_id = %s", (user_id,)
            )
            row = cursor.fetchone()
            return row_to_user(row) if row else None

    @staticmethod
    def update_profile(
        user_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        location: Optional[Location] = None,
    ) -> Optional[User]:
        lat = location.lat if location else None
        lng = location.lng if location else None

        with get_db_cursor() as cursor:
            cursor.execute(
                f"""
                UPDATE users
                SET name = COALESCE(%s, name),
                    phone = COALESCE(%s, phone),
                    lat = COALESCE(%s, lat),
                    lng = COALESCE(%s, lng)
                WHERE user_id = %s
                RETURNING {USER_COLUMNS}
                """,
                (name, phone, lat, lng, user_id),
            )
            row = cursor.fetchone()
            return row_to_user(row) if row else None

    @staticmethod
    def change_password(user_id: str, current_password: str, new_password: str):
        with get_db_cursor() as cursor:
            cursor.execute(
                "SELECT password_hash FROM users WHERE user_id = %s", (user_id,)
            )
            row = cursor.fetchone()

            if not row or not verify_password(current_password, row["password_hash"]):
                raise InvalidRequestException("Current password is incorrect")

            cursor.execute(
                "UPDATE users SET password_hash = %s WHERE user_id = %s",
                (get_password_hash(new_password), user_id),
            )
