from datetime import datetime, timedelta, timezone
from typing import Optional, Union, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


# 암호화 컨텍스트 설정
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ADMIN_ACTOR = "admin"
USER_ACTOR = "user"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 해시된 비밀번호 비교"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """비밀번호 해싱"""
    return pwd_context.hash(password)


def _default_expiry(actor: str) -> timedelta:
    # 사용자 토큰이 관리자 토큰보다 만료 기간이 김
    if actor == ADMIN_ACTOR:
        return timedelta(days=settings.ADMIN_TOKEN_EXPIRE_DAYS)
    return timedelta(days=settings.USER_TOKEN_EXPIRE_DAYS)


def create_access_token(
    subject: Union[str, Any],
    actor: str = USER_ACTOR,
    role: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Access Token 생성
    subject -> 관리자/사용자 식별자
    actor -> admin | user (같은 secret으로 서명하므로 토큰 용도 구분 필수)
    expires_delta -> 만료 시간 커스텀 설정
    """
    # datetime.now를 사용해 명시적으로 UTC 타임존 지정
    expire = datetime.now(timezone.utc) + (expires_delta or _default_expiry(actor))

    to_encode = {
        "sub": str(subject),
        "exp": expire,
        "type": "access",
        "actor": actor,
    }
    if role:
        to_encode["role"] = role

    encoded_jwt = jwt.encode(
        to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )
    return encoded_jwt


def decode_token(token: str) -> Optional[dict]:
    """
    토큰 디코딩 및 검증
    return payload dict or None(유효하지 않은 경우)
    """
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError as e:
        logger.warning(f"JWT error: {e}")
        return None
