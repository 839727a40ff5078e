import json
import logging
from typing import Any

import redis

from devevent.core.config import get_cache_ttl, get_redis_url

logger = logging.getLogger(__name__)

EVENT_LIST_KEY = "events:list"


def get_redis_client():
    """Get Redis client for the event cache."""
    return redis.from_url(get_redis_url(), decode_responses=True)


def event_key(slug: str) -> str:
    return f"events:slug:{slug}"


def get_cached(key: str) -> Any | None:
    try:
        raw = get_redis_client().get(key)
    except redis.exceptions.RedisError as exc:
        logger.warning("Cache read failed for %s: %s", key, exc)
        return None
    if raw is None:
        return None
    return json.loads(raw)


def set_cached(key: str, value: Any) -> None:
    try:
        get_redis_client().setex(key, get_cache_ttl(), json.dumps(value))
    except redis.exceptions.RedisError as exc:
        logger.warning("Cache write failed for %s: %s", key, exc)


def invalidate(*keys: str) -> None:
    if not keys:
        return
    try:
        get_redis_client().delete(*keys)
    except redis.exceptions.RedisError as exc:
        logger.warning("Cache invalidation failed for %s: %s", ", ".join(keys), exc)
