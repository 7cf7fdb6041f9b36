"""In-memory sliding-window rate limiter for the public confirmation endpoints."""

import time
from collections import defaultdict
from threading import Lock


class RateLimiter:
    """Sliding-window limiter keyed by client address.

    Each key keeps the monotonic timestamps of its recent calls; a call is
    rejected once the window already holds ``max_requests`` of them.
    """

    def __init__(self, max_requests: int, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: dict[str, list[float]] = defaultdict(list)
        self._lock = Lock()

    def is_allowed(self, key: str) -> bool:
        now = time.monotonic()
        cutoff = now - self.window_seconds

        with self._lock:
            recent = [t for t in self._hits[key] if t > cutoff]
            if len(recent) >= self.max_requests:
                self._hits[key] = recent
                return False
            recent.append(now)
            self._hits[key] = recent
            return True

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
