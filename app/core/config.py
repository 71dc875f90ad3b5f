import os
from typing import Dict, Any
from dotenv import load_dotenv

load_dotenv()  # 환경변수 읽어오기


class Settings:
    PROJECT_NAME: str = "Mwaslatak Network API"
    VERSION: str = "1.0.0"

    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    PORT: int = int(os.getenv("PORT", 3000))

    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", 5432))
    DB_NAME: str = os.getenv("DB_NAME", "mwaslatak_transport")
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")
    DB_SSLMODE: str = os.getenv("DB_SSLMODE", "prefer")
    DB_POOL_MIN: int = int(os.getenv("DB_POOL_MIN", 2))
    DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", 20))

    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", 6379))
    REDIS_DB: int = int(os.getenv("REDIS_DB", 0))

    # 노선망 캐시 => 쓰기 발생 시 version 증가로 무효화
    ENABLE_NETWORK_CACHE: bool = (
        os.getenv("ENABLE_NETWORK_CACHE", "true").lower() == "true"
    )
    NETWORK_CACHE_TTL_SECONDS: int = int(
        os.getenv("NETWORK_CACHE_TTL_SECONDS", 300)
    )  # 5분

    # JWT 설정
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret-change-me")
    JWT_ALGORITHM: str = "HS256"
    ADMIN_TOKEN_EXPIRE_DAYS: int = int(os.getenv("ADMIN_TOKEN_EXPIRE_DAYS", 7))
    USER_TOKEN_EXPIRE_DAYS: int = int(os.getenv("USER_TOKEN_EXPIRE_DAYS", 30))
    COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "False").lower() == "true"

    # 로그인 실패 잠금 정책 (관리자가 더 엄격)
    ADMIN_MAX_LOGIN_ATTEMPTS: int = int(os.getenv("ADMIN_MAX_LOGIN_ATTEMPTS", 5))
    ADMIN_LOCK_MINUTES: int = int(os.getenv("ADMIN_LOCK_MINUTES", 120))
    USER_MAX_LOGIN_ATTEMPTS: int = int(os.getenv("USER_MAX_LOGIN_ATTEMPTS", 5))
    USER_LOCK_MINUTES: int = int(os.getenv("USER_LOCK_MINUTES", 60))

    # 성능 모니터링
    ENABLE_PERFORMANCE_MONITORING: bool = (
        os.getenv("ENABLE_PERFORMANCE_MONITORING", "true").lower() == "true"
    )
    SLOW_REQUEST_THRESHOLD_MS: int = int(os.getenv("SLOW_REQUEST_THRESHOLD_MS", 1000))

    # CORS 설정
    # allow_credentials=True 이므로 "*" 사용 불가 => origin 명시
    ALLOWED_ORIGINS: list[str] = os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
    ).split(",")

    @property
    def DB_CONFIG(self) -> Dict[str, Any]:
        return {
            "host": self.DB_HOST,
            "port": self.DB_PORT,
            "database": self.DB_NAME,
            "user": self.DB_USER,
            "password": self.DB_PASSWORD,
            "sslmode": self.DB_SSLMODE,
            "connect_timeout": 30,
        }


settings = Settings()  # 모듈화


METRO_TRANSPORT_TYPE = "metro"

TRANSPORT_TYPES = ["metro", "microbus", "minibus", "bus", "taxi", "tram"]

# Station.station_type은 생성 시 지정하는 정적 분류
# 노선망 집계의 환승역(2개 이상 노선 소속)과는 별개
STATION_TYPES = ["metro", "bus_stop", "terminal", "interchange"]

CURRENCIES = ["EGP", "USD", "EUR"]
DEFAULT_CURRENCY = "EGP"

ADMIN_ROLES = ["admin", "super_admin"]
SUPER_ADMIN_ROLE = "super_admin"

USER_ROLES = ["user", "premium_user"]

# 쿠키 이름 (관리자/사용자 구분)
ADMIN_TOKEN_COOKIE = "token"
USER_TOKEN_COOKIE = "userToken"
