"""
Rate limiting for FUELPOOL write endpoints using SlowAPI.

Counters live in Redis when it is reachable; without Redis the limiter
is disabled rather than falling back to per-process counters.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
import redis
import logging

from api.config import settings

logger = logging.getLogger(__name__)


def _connect_redis():
    if not (settings.redis_enabled and settings.rate_limit_enabled):
        return None
    try:
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=5
        )
        client.ping()
        logger.info("Redis connection established")
        return client
    except redis.RedisError as e:
        logger.error(f"Redis connection failed: {e}")
        logger.warning("Rate limiting disabled without Redis")
        return None


redis_client = _connect_redis()


def get_api_key_identifier(request: Request) -> str:
    """
    Rate limit bucket: the API key prefix when one is sent, else the
    client IP address.
    """
    api_key = request.headers.get(settings.api_key_header)
    if api_key:
        return f"key:{api_key[:8]}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_api_key_identifier,
    enabled=settings.rate_limit_enabled and redis_client is not None,
    storage_uri=settings.redis_url if redis_client else "memory://",
    strategy="fixed-window",
)


def get_rate_limit_string() -> str:
    """Rate limit string for ``@limiter.limit()`` (e.g. "60/minute")."""
    return f"{settings.rate_limit_per_minute}/minute"
