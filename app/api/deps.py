from typing import Optional
from uuid import UUID
from fastapi import Cookie, Depends
from fastapi.security import OAuth2PasswordBearer

from app.auth.security import decode_token, ADMIN_ACTOR, USER_ACTOR
from app.core.config import ADMIN_TOKEN_COOKIE, USER_TOKEN_COOKIE
from app.core.exceptions import AuthenticationException, NotAuthorizedException
from app.models.domain import Admin, User
from app.services.auth_service import AuthService

# DB 조회(psycopg2)가 동기 방식 => 의존성도 일반 def (threadpool에서 실행)

# auto_error=False -> Authorization 헤더가 없으면 None 반환
# => 쿠키 토큰으로 fallback 하기 위해 필수
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/v1/users/login", auto_error=False)


def _subject_for(token: Optional[str], actor: str) -> str:
    """토큰 검증 후 sub 반환, 실패 시 401"""
    if not token:
        raise AuthenticationException()

    payload = decode_token(token)
    if payload is None or payload.get("type") != "access":
        raise AuthenticationException()

    # 관리자 토큰으로 사용자 API 접근(또는 반대) 차단
    if payload.get("actor") != actor:
        raise AuthenticationException()

    try:
        return str(UUID(str(payload.get("sub"))))
    except ValueError:
        raise AuthenticationException()


def get_current_admin(
    bearer: Optional[str] = Depends(oauth2_scheme),
    admin_token: Optional[str] = Cookie(default=None, alias=ADMIN_TOKEN_COOKIE),
) -> Admin:
    admin_id = _subject_for(bearer or admin_token, ADMIN_ACTOR)

    admin = AuthService.get_admin_by_id(admin_id)
    if admin is None or not admin.is_active or admin.is_locked:
        raise AuthenticationException()
    return admin


def require_super_admin(admin: Admin = Depends(get_current_admin)) -> Admin:
    if not admin.is_super_admin:
        raise NotAuthorizedException(f"Admin role {admin.role} is not authorized")
    return admin


def get_current_user(
    bearer: Optional[str] = Depends(oauth2_scheme),
    user_token: Optional[str] = Cookie(default=None, alias=USER_TOKEN_COOKIE),
) -> User:
    user_id = _subject_for(bearer or user_token, USER_ACTOR)

    user = AuthService.get_user_by_id(user_id)
    if user is None or not user.is_active or user.is_locked:
        raise AuthenticationException()
    return user

