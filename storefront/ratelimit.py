# storefront/ratelimit.py
"""Per-client request budgets for the auth and contact routes.

In-memory sliding window, one per process. Behind several workers each one
counts on its own.
"""
import logging
import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import Request

from .errors import RateLimited

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, limit: int, window_seconds: float, message: str = None,
                 clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.message = message
        self.clock = clock
        self._hits: Dict[str, Deque[float]] = {}

    def hit(self, key: str) -> None:
        """Record one request for ``key``; raise RateLimited once over budget."""
        now = self.clock()
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()
        if len(hits) >= self.limit:
            logger.warning("Rate limit exceeded", extra={"client": key})
            raise RateLimited(self.message)
        hits.append(now)

    def reset(self) -> None:
        self._hits.clear()


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def rate_limit(name: str):
    """Dependency enforcing the limiter registered under ``name`` on app.state."""

    async def dependency(request: Request) -> None:
        if not request.app.state.settings.rate_limit_enabled:
            return
        request.app.state.rate_limiters[name].hit(client_key(request))

    return dependency
