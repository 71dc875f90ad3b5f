import logging
from typing import Optional

from app.algorithms.network_aggregator import build_network_view
from app.core.config import METRO_TRANSPORT_TYPE, settings
from app.db import repository
from app.db.redis_client import init_redis
from app.models.network import NetworkView

logger = logging.getLogger(__name__)


class NetworkService:
    """
    노선망 조회 서비스 (관리자/사용자/공개 엔드포인트가 공통으로 사용)

    저장소에서 활성 역/노선을 읽어 집계하고, 결과를 data version 기준으로 캐싱
    """

    @staticmethod
    def _station_type_for(transport_type: str) -> Optional[str]:
        # metro 노선망은 metro 역만 집계 (기존 동작)
        # 그 외 교통수단은 역 분류가 교통수단과 1:1 대응하지 않으므로 전체 활성 역
        return "metro" if transport_type == METRO_TRANSPORT_TYPE else None

    @staticmethod
    def load_and_build(transport_type: str) -> NetworkView:
        stations = repository.list_stations(
            station_type=NetworkService._station_type_for(transport_type), active=True
        )
        routes = repository.list_routes(transport_type=transport_type, active=True)

        view = build_network_view(stations, routes)
        logger.info(
            f"노선망 집계 완료: type={transport_type}, "
            f"stations={view.metadata.total_stations}, "
            f"routes={view.metadata.total_routes}, "
            f"interchanges={view.metadata.interchange_count}"
        )
        return view

    @staticmethod
    def get_network_view(transport_type: str = METRO_TRANSPORT_TYPE) -> NetworkView:
        if not settings.ENABLE_NETWORK_CACHE:
            return NetworkService.load_and_build(transport_type)

        cache = init_redis()
        version = cache.current_version()

        if version is not None:
            cached = cache.get(transport_type, version)
            if cached is not None:
                return cached

        view = NetworkService.load_and_build(transport_type)

        if version is not None:
            cache.set(transport_type, version, view)

        return view

    @staticmethod
    def invalidate():
        """역/노선 쓰기 후 호출"""
        if not settings.ENABLE_NETWORK_CACHE:
            return
        init_redis().invalidate()
