"""
Mwaslatak Network API - FastAPI Application

교통 노선망 관리 백엔드
역/노선 등록(관리자), 노선망 집계 조회(관리자/사용자/공개)
"""

import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import NetworkAPIException
from app.db.database import initialize_pool, close_pool, get_db_connection
from app.db.redis_client import init_redis
from app.api.v1.router import api_router

# 성능 모니터링
from app.middleware.performance_monitoring import (
    PerformanceMonitoringMiddleware,
    RequestLoggingMiddleware,
    get_metrics_collector,
)

# 로깅 설정
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    서버 시작 시: PostgreSQL 연결 풀, Redis 노선망 캐시 초기화
    서버 종료 시: PostgreSQL 연결 풀 종료
    """
    # ========== Startup ==========
    logger.info(f"{settings.PROJECT_NAME} 시작 중...")

    try:
        logger.info("1/2 PostgreSQL 연결 풀 초기화 중...")
        initialize_pool()

        logger.info("2/2 Redis 노선망 캐시 초기화 중...")
        init_redis()

        logger.info(f"{settings.PROJECT_NAME} 시작 완료")

    except Exception as e:
        logger.error(f"초기화 실패: {e}", exc_info=True)
        raise

    yield

    # ========== Shutdown ==========
    logger.info(f"{settings.PROJECT_NAME} 종료 중...")
    close_pool()


# FastAPI 애플리케이션 생성
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    ## 대중교통 노선망 API

    - 관리자: 역/노선 등록, 수정, 삭제(soft delete)
    - 노선망 조회: 역별 연결 역, 환승역, 네트워크 통계
    - 인증: JWT (Authorization: Bearer 또는 쿠키)
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS 설정
# allow_credentials=True일 때는 allow_origins에 ["*"]를 사용할 수 없음
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.ENABLE_PERFORMANCE_MONITORING:
    app.add_middleware(PerformanceMonitoringMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    logger.info("성능 모니터링 미들웨어 활성화")

# API 라우터 등록
app.include_router(api_router, prefix="/v1")


# ========== Health Check Endpoints ==========


@app.get("/")
async def root():
    return {
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health_check():
    """
    헬스 체크 (로드 밸런서, 모니터링)
    - 데이터베이스 연결 상태
    - Redis 연결 상태 (캐시 비활성화 시 disabled)
    DB/Redis 호출이 동기 방식이라 일반 def로 선언
    """
    try:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
        db_status = "healthy"
    except Exception as e:
        logger.error(f"DB 헬스 체크 실패: {e}")
        db_status = "unhealthy"

    # Redis 장애는 캐시 미스로 처리되므로 서비스 상태에는 영향 없음
    if settings.ENABLE_NETWORK_CACHE:
        redis_status = "healthy" if init_redis().ping() else "unhealthy"
    else:
        redis_status = "disabled"

    overall_status = "healthy" if db_status == "healthy" else "unhealthy"

    return JSONResponse(
        status_code=200 if overall_status == "healthy" else 503,
        content={
            "status": overall_status,
            "version": settings.VERSION,
            "timestamp": time.time(),
            "components": {"database": db_status, "redis": redis_status},
        },
    )


@app.get("/v1/metrics")
async def get_metrics():
    """
    성능 메트릭
    (nginx가 /metrics -> /v1/metrics로 프록시)
    """
    if not settings.ENABLE_PERFORMANCE_MONITORING:
        return {"message": "성능 모니터링이 비활성화되어 있습니다"}

    metrics = get_metrics_collector()
    return {
        "summary": metrics.get_summary(),
        "top_paths": metrics.get_path_stats(top_n=10),
        "configuration": {
            "slow_request_threshold_ms": settings.SLOW_REQUEST_THRESHOLD_MS,
            "monitoring_enabled": settings.ENABLE_PERFORMANCE_MONITORING,
        },
    }


# ========== Exception Handlers ==========
# 모든 오류 응답은 {"success": false, "error": "..."} 형태


@app.exception_handler(NetworkAPIException)
async def network_api_exception_handler(request: Request, exc: NetworkAPIException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


# 존재하지 않는 경로(404), 허용되지 않은 메서드(405)도 포함
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # 첫 번째 검증 오류 메시지만 노출
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"success": False, "error": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"예상치 못한 오류: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500, content={"success": False, "error": "Server error"}
    )


# ========== Development Server ==========

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
