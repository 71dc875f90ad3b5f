import redis
import json
from typing import Optional
import logging

from app.core.config import settings
from app.models.network import NetworkView

logger = logging.getLogger(__name__)

VERSION_KEY = "network:version"


class RedisNetworkCache:
    """
    노선망 뷰 캐시

    key = network:view:{transport_type}:v{version}
    역/노선이 생성/수정/삭제될 때마다 network:version을 증가시켜
    이전 version의 캐시는 더 이상 조회되지 않음 (TTL로 자연 만료)

    조회 시점의 version을 먼저 읽고 같은 version 키에 저장하므로
    집계 도중 쓰기가 발생해도 오래된 뷰가 새 version으로 저장되지 않음

    Redis 오류는 캐시 miss로 취급 => 요청 자체는 실패하지 않음
    """

    def __init__(self):
        self.redis_client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
        )
        self.ttl_seconds = settings.NETWORK_CACHE_TTL_SECONDS

    @staticmethod
    def view_key(transport_type: str, version: int) -> str:
        return f"network:view:{transport_type}:v{version}"

    def current_version(self) -> Optional[int]:
        """현재 데이터 version, Redis 오류 시 None (=> 캐시 사용 안 함)"""
        try:
            version = self.redis_client.get(VERSION_KEY)
            return int(version) if version else 0
        except redis.RedisError as e:
            logger.warning(f"노선망 캐시 version 조회 실패: {e}")
            return None

    def get(self, transport_type: str, version: int) -> Optional[NetworkView]:
        """캐시된 뷰 조회, 없으면 None"""
        key = self.view_key(transport_type, version)
        try:
            data = self.redis_client.get(key)

            if not data:
                return None

            logger.debug(f"노선망 캐시 hit: {key}")
            return NetworkView.model_validate(json.loads(data))
        except redis.RedisError as e:
            logger.warning(f"노선망 캐시 조회 실패: key={key}, 오류: {e}")
            return None
        except ValueError as e:
            # 손상된 payload => miss 처리 후 재계산
            logger.error(f"노선망 캐시 역직렬화 실패: key={key}, 오류: {e}")
            return None

    def set(self, transport_type: str, version: int, view: NetworkView) -> bool:
        key = self.view_key(transport_type, version)
        try:
            payload = view.model_dump_json(by_alias=True)
            self.redis_client.setex(key, self.ttl_seconds, payload)
            return True
        except redis.RedisError as e:
            logger.warning(f"노선망 캐시 저장 실패: key={key}, 오류: {e}")
            return False

    def ping(self) -> bool:
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError as e:
            logger.error(f"Redis 헬스 체크 실패: {e}")
            return False

    def invalidate(self) -> bool:
        """모든 교통수단의 캐시 무효화"""
        try:
            version = self.redis_client.incr(VERSION_KEY)
            logger.debug(f"노선망 캐시 무효화: version={version}")
            return True
        except redis.RedisError as e:
            logger.error(f"노선망 캐시 무효화 실패: {e}")
            return False


_network_cache: Optional[RedisNetworkCache] = None


def init_redis() -> RedisNetworkCache:
    global _network_cache
    if _network_cache is None:
        _network_cache = RedisNetworkCache()
        logger.info("Redis 노선망 캐시 클라이언트 초기화")
    return _network_cache
