"""
데이터베이스 연결, 저장소, 노선망 캐시
"""

from app.db.database import (
    initialize_pool,
    close_pool,
    get_db_connection,
    get_db_cursor,
)
from app.db.redis_client import RedisNetworkCache, init_redis

__all__ = [
    "initialize_pool",
    "close_pool",
    "get_db_connection",
    "get_db_cursor",
    "RedisNetworkCache",
    "init_redis",
]
