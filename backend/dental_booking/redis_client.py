# backend/dental_booking/redis_client.py
"""
Shared Redis client.

Redis is optional: without REDIS_URL the commit guard and event queue
are disabled and `redis_client` is None.
"""

from typing import Optional

from redis import Redis

from .config import settings


def _build_client() -> Optional[Redis]:
    if not settings.redis_url:
        return None
    # from_url does not connect until the first command
    return Redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_timeout=2.0,
    )


redis_client: Optional[Redis] = _build_client()


# FastAPI dependency
def get_redis() -> Optional[Redis]:
    return redis_client
