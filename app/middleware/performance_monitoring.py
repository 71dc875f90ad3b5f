# 요청 처리 시간 측정 + 메모리 메트릭 수집

import time
import logging
import threading
from typing import Callable, Dict
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.config import settings

logger = logging.getLogger(__name__)


def _route_template(request: Request) -> str:
    """
    /v1/stations/{station_id} 처럼 라우트 패턴 기준으로 집계
    (id별로 통계가 쪼개지지 않도록)
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class MetricsCollector:
    """
    프로세스 메모리에 요청 통계를 누적
    워커 프로세스마다 별도로 집계됨
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.reset()

    def reset(self):
        self.request_count = 0
        self.total_elapsed_time_ms = 0.0
        self.slow_request_count = 0
        self.error_count = 0
        self.path_stats: Dict[str, Dict] = {}

    def record_request(
        self,
        path: str,
        method: str,
        status_code: int,
        elapsed_time_ms: float,
        is_slow: bool = False,
    ):
        with self._lock:
            self.request_count += 1
            self.total_elapsed_time_ms += elapsed_time_ms
            if is_slow:
                self.slow_request_count += 1
            if status_code >= 500:
                self.error_count += 1

            stats = self.path_stats.setdefault(
                f"{method} {path}",
                {"count": 0, "total_time_ms": 0.0, "slow_count": 0, "error_count": 0},
            )
            stats["count"] += 1
            stats["total_time_ms"] += elapsed_time_ms
            if is_slow:
                stats["slow_count"] += 1
            if status_code >= 500:
                stats["error_count"] += 1

    def get_summary(self) -> dict:
        with self._lock:
            count = self.request_count
            return {
                "total_requests": count,
                "average_elapsed_time_ms": (
                    round(self.total_elapsed_time_ms / count, 2) if count else 0
                ),
                "slow_requests": self.slow_request_count,
                "server_errors": self.error_count,
                "success_rate": (
                    round((count - self.error_count) / count * 100, 2) if count else 0
                ),
            }

    def get_path_stats(self, top_n: int = 10) -> list:
        """요청 수 기준 상위 N개 경로"""
        with self._lock:
            ranked = sorted(
                self.path_stats.items(), key=lambda item: item[1]["count"], reverse=True
            )[:top_n]

            return [
                {
                    "path": path,
                    "count": stats["count"],
                    "avg_time_ms": round(stats["total_time_ms"] / stats["count"], 2),
                    "slow_count": stats["slow_count"],
                    "error_count": stats["error_count"],
                }
                for path, stats in ranked
            ]


_metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    return _metrics_collector


class PerformanceMonitoringMiddleware(BaseHTTPMiddleware):
    """
    모든 HTTP 요청의 처리 시간을 X-Process-Time-Ms 헤더로 반환하고
    MetricsCollector에 기록. threshold 초과 요청은 경고 로그
    """

    def __init__(self, app: ASGIApp, collector: MetricsCollector = None):
        super().__init__(app)
        self.slow_threshold_ms = settings.SLOW_REQUEST_THRESHOLD_MS
        self.collector = collector or get_metrics_collector()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_time_ms = (time.perf_counter() - start_time) * 1000
            self.collector.record_request(
                _route_template(request), request.method, 500, elapsed_time_ms
            )
            logger.error(
                f"요청 처리 중 예외 발생: {request.method} {request.url.path}, "
                f"소요시간={elapsed_time_ms:.2f}ms, 예외={e}"
            )
            raise

        elapsed_time_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Process-Time-Ms"] = f"{elapsed_time_ms:.2f}"

        is_slow = elapsed_time_ms > self.slow_threshold_ms
        if is_slow:
            logger.warning(
                f"느린 요청 감지: {request.method} {request.url.path}, "
                f"소요시간={elapsed_time_ms:.2f}ms (기준: {self.slow_threshold_ms}ms)"
            )

        self.collector.record_request(
            _route_template(request),
            request.method,
            response.status_code,
            elapsed_time_ms,
            is_slow=is_slow,
        )
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        client = request.client.host if request.client else "unknown"
        logger.info(f"→ {request.method} {request.url.path} from {client}")

        response = await call_next(request)

        # 4xx는 클라이언트 오류라 WARNING, 5xx만 ERROR
        if response.status_code >= 500:
            log_level = logging.ERROR
        elif response.status_code >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            f"← {request.method} {request.url.path} status={response.status_code}",
        )
        return response
