"""
Health checks for FUELPOOL API.

Liveness only proves the process answers; readiness and the full check
also query the database (required) and Redis (optional, rate limiting).
"""
import logging
import time
from typing import Dict, Any, Optional
from datetime import datetime, timezone
from enum import Enum
from dataclasses import dataclass

import redis
from sqlalchemy import text

from api.config import settings

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


class HealthStatus(Enum):
    """Health check status."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""
    name: str
    status: HealthStatus
    latency_ms: Optional[float] = None
    message: Optional[str] = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def check_database_health() -> ComponentHealth:
    """Run ``SELECT 1`` against the configured database."""
    from api.database import SessionLocal

    start = time.perf_counter()
    db = SessionLocal()
    try:
        result = db.execute(text("SELECT 1")).scalar()
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return ComponentHealth(
            name="database",
            status=HealthStatus.UNHEALTHY,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            message=f"Connection failed: {type(e).__name__}",
        )
    finally:
        db.close()

    latency_ms = round((time.perf_counter() - start) * 1000, 2)
    if result != 1:
        return ComponentHealth(
            name="database",
            status=HealthStatus.UNHEALTHY,
            latency_ms=latency_ms,
            message="Unexpected query result",
        )
    return ComponentHealth(
        name="database",
        status=HealthStatus.HEALTHY,
        latency_ms=latency_ms,
        message="Database connected",
    )


def check_redis_health() -> ComponentHealth:
    """Ping Redis; a disabled Redis counts as healthy, an unreachable one degrades."""
    if not settings.redis_enabled:
        return ComponentHealth(
            name="redis",
            status=HealthStatus.HEALTHY,
            message="Redis disabled (not required)",
        )

    start = time.perf_counter()
    try:
        client = redis.from_url(
            settings.redis_url,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        client.ping()
    except redis.RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        return ComponentHealth(
            name="redis",
            status=HealthStatus.DEGRADED,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            message=f"Connection failed: {type(e).__name__}",
        )

    return ComponentHealth(
        name="redis",
        status=HealthStatus.HEALTHY,
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
        message="Redis connected",
    )


async def perform_full_health_check() -> Dict[str, Any]:
    """Overall status is the worst status of any component."""
    components = [check_database_health(), check_redis_health()]

    if any(c.status == HealthStatus.UNHEALTHY for c in components):
        overall = HealthStatus.UNHEALTHY
    elif any(c.status == HealthStatus.DEGRADED for c in components):
        overall = HealthStatus.DEGRADED
    else:
        overall = HealthStatus.HEALTHY

    return {
        "status": overall.value,
        "timestamp": _now(),
        "version": API_VERSION,
        "components": {
            c.name: {
                "status": c.status.value,
                "latency_ms": c.latency_ms,
                "message": c.message,
            }
            for c in components
        },
    }


async def perform_liveness_check() -> Dict[str, Any]:
    return {"status": "alive", "timestamp": _now()}


async def perform_readiness_check() -> Dict[str, Any]:
    """Ready when the database answers."""
    db_health = check_database_health()
    return {
        "status": "ready" if db_health.status == HealthStatus.HEALTHY else "not_ready",
        "timestamp": _now(),
        "database": db_health.status.value,
    }
