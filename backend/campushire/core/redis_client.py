"""
Redis-backed cache for derived read models

Cache failures are logged and treated as misses; callers always fall back
to recomputing from the database.
"""
import json
from typing import Any, Optional

import redis
import structlog

from campushire.core.config import settings

logger = structlog.get_logger()

KEY_NAMESPACE = "campushire"

_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    """Shared client, created on first use so the app can boot without Redis"""
    global _client
    if _client is None:
        _client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
            retry_on_timeout=True,
            health_check_interval=30,
        )
    return _client


def get_cache_key(prefix: str, *parts: Any) -> str:
    return ":".join([KEY_NAMESPACE, prefix, *(str(part) for part in parts)])


def get_cache(key: str) -> Optional[Any]:
    if not settings.CACHE_ENABLED:
        return None
    try:
        raw = get_redis().get(key)
    except redis.RedisError as e:
        logger.warning("cache_get_failed", key=key, error=str(e))
        return None
    return json.loads(raw) if raw is not None else None


def set_cache(key: str, value: Any, ttl: Optional[int] = None) -> bool:
    if not settings.CACHE_ENABLED:
        return False
    try:
        return bool(get_redis().setex(key, ttl or settings.REDIS_CACHE_TTL, json.dumps(value, default=str)))
    except redis.RedisError as e:
        logger.warning("cache_set_failed", key=key, error=str(e))
        return False


def delete_cache(key: str) -> bool:
    if not settings.CACHE_ENABLED:
        return False
    try:
        return bool(get_redis().delete(key))
    except redis.RedisError as e:
        logger.warning("cache_delete_failed", key=key, error=str(e))
        return False
