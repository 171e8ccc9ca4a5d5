"""Per-identifier rate limiter

Thin wrapper over the ``limits`` fixed-window strategy. Each identifier (the
caller IP for the account actions) gets its own counter per window; counters
live in Redis in production and in memory in tests.
"""

import logging
import time
from typing import Optional

from limits import RateLimitItemPerSecond
from limits.aio.storage import Storage
from limits.aio.strategies import FixedWindowRateLimiter
from limits.storage import storage_from_string

from account_service.config.settings import get_settings
from account_service.domain.models import RateLimitResult

logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed-window request limiter

    Attributes:
        max_requests: Allowed hits per identifier per window
        window_seconds: Window length in seconds
        prefix: Namespace for the counters
        enabled: When False every call succeeds without touching storage
    """

    def __init__(
        self,
        storage: Optional[Storage],
        max_requests: int = 5,
        window_seconds: int = 60,
        prefix: str = "ratelimit",
        enabled: bool = True,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.prefix = prefix
        self.enabled = enabled

        self.item = RateLimitItemPerSecond(max_requests, window_seconds)
        self._strategy = FixedWindowRateLimiter(storage) if enabled else None

    async def limit(self, identifier: str) -> RateLimitResult:
        """Register one hit for identifier and report whether it is allowed

        Args:
            identifier: Rate limit key (caller IP)

        Returns:
            RateLimitResult with success flag and remaining budget
        """
        if not self.enabled:
            return RateLimitResult(
                success=True,
                limit=self.max_requests,
                remaining=self.max_requests,
                reset=int(time.time()) + self.window_seconds,
            )

        success = await self._strategy.hit(self.item, self.prefix, identifier)
        stats = await self._strategy.get_window_stats(self.item, self.prefix, identifier)

        if not success:
            logger.warning(
                f"Rate limit exceeded for {identifier}: "
                f"{self.max_requests} per {self.window_seconds}s"
            )

        return RateLimitResult(
            success=success,
            limit=self.max_requests,
            remaining=stats.remaining,
            reset=int(stats.reset_time),
        )


# Global storage instance (one connection pool per process)
_storage: Optional[Storage] = None


def get_rate_limit_storage() -> Storage:
    """Get or create the Redis-backed counter storage

    Returns:
        Async limits storage bound to settings.redis_url
    """
    global _storage
    if _storage is None:
        settings = get_settings()
        _storage = storage_from_string(f"async+{settings.redis_url}", implementation="redispy")
        logger.info(
            f"Rate limit storage: {settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
        )
    return _storage
