"""
Redis-backed fixed-window rate limiter for the login endpoint.
"""
from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status
from redis.asyncio import Redis

from app.core.config import settings
from app.core.redis import get_redis_client

logger = logging.getLogger(__name__)

AUTH_RATE_WINDOW = 60  # seconds


async def check_login_rate_limit(request: Request) -> None:
    """
    FastAPI dependency: limit login attempts per client IP.

    Redis outages do not block logins (fail-open).

    Raises:
        HTTPException: 429 Too Many Requests.
    """
    client_ip = request.client.host if request.client else "unknown"
    key = f"rl:login:{client_ip}"
    limit = settings.AUTH_RATE_LIMIT_PER_MINUTE

    try:
        redis: Redis = get_redis_client()
        current = await redis.incr(key)
        if current == 1:
            await redis.expire(key, AUTH_RATE_WINDOW)

        if current > limit:
            ttl = await redis.ttl(key)
            logger.warning("rate_limit_exceeded ip=%s count=%d limit=%d", client_ip, current, limit)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Muitas tentativas. Tente novamente em breve.",
                headers={"Retry-After": str(max(ttl, 1))},
            )
    except HTTPException:
        raise
    except Exception:
        logger.exception("rate_limit redis error, allowing request")
