"""
In-memory fixed-window rate limiting for form submissions.

Each client address gets at most max_requests submissions per window.
Counters live on the application instance; an APScheduler job purges
expired windows so the table does not grow with every visitor.
"""

import logging
import time
from threading import Lock
from typing import Callable, Dict, Optional

from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many submissions from this IP, please try again later."


class RateLimiter:
    def __init__(self, max_requests: int, window_seconds: int, clock: Optional[Callable[[], float]] = None):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        # Format: {key: {'count': int, 'reset_time': float}}
        self._windows: Dict[str, dict] = {}
        self._lock = Lock()

    def hit(self, key: str) -> bool:
        """
        Count one request for key.

        Returns:
            bool: True if the request is within the limit, False if it must be rejected
        """
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or window["reset_time"] <= now:
                window = {"count": 0, "reset_time": now + self.window_seconds}
                self._windows[key] = window

            window["count"] += 1
            return window["count"] <= self.max_requests

    def purge_expired(self) -> int:
        """Remove expired windows, returning how many were dropped"""
        now = self._clock()
        with self._lock:
            expired = [key for key, window in self._windows.items() if window["reset_time"] <= now]
            for key in expired:
                del self._windows[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._windows)


def client_key(request: Request) -> str:
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency rejecting clients that exceeded their submission budget"""
    limiter: Optional[RateLimiter] = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return

    key = client_key(request)
    if not limiter.hit(key):
        logger.warning(f"⚠️ Rate limit exceeded for {key} on {request.url.path}")
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=RATE_LIMIT_MESSAGE)
