from typing import Optional

from ...application.ports.rate_limiter import RateLimiter
from .memory_rate_limiter import InMemoryRateLimiter


def build_rate_limiter(redis_url: Optional[str]) -> RateLimiter:
    if redis_url:
        from .redis_rate_limiter import RedisRateLimiter
        return RedisRateLimiter(url=redis_url)
    return InMemoryRateLimiter()
