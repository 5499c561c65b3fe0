import json
import time

import redis
from redis.exceptions import RedisError

from app.core.config import REDIS_URL
from app.core.logging_config import get_logger

logger = get_logger()

_redis_client = None
_retry_after = 0.0

# Seconds to wait before trying an unreachable Redis again
RETRY_BACKOFF = 30


def get_redis_client():
    global _redis_client, _retry_after

    if _redis_client is not None:
        return _redis_client

    if not REDIS_URL or time.monotonic() < _retry_after:
        return None

    try:
        client = redis.Redis.from_url(
            REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        client.ping()
        logger.info("Redis connected")
        _redis_client = client
        return _redis_client
    except RedisError as e:
        _retry_after = time.monotonic() + RETRY_BACKOFF
        logger.warning(f"Redis unavailable, retrying in {RETRY_BACKOFF}s: {e}")
        return None


def get_cache(key: str):
    client = get_redis_client()
    if not client:
        return None
    try:
        data = client.get(key)
        return json.loads(data) if data else None
    except RedisError:
        return None


def set_cache(key: str, value, ttl: int = 60):
    client = get_redis_client()
    if not client:
        return
    try:
        client.setex(key, ttl, json.dumps(value))
    except RedisError as e:
        logger.warning(f"Cache write failed for {key}: {e}")


def delete_cache(*keys: str):
    client = get_redis_client()
    if not client or not keys:
        return
    try:
        client.delete(*keys)
    except RedisError as e:
        logger.warning(f"Cache delete failed for {keys}: {e}")
