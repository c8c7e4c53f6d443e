"""
Per-user request rate limiting.

In-memory sliding window, disabled by default. Single-process only;
not shared across workers.

Dependencies: None
System role: Request throttling for ask
"""

import time
from collections import deque
from typing import Callable

from spacerag.configs.chat import ChatSettings
from spacerag.core.exceptions import RateLimitExceededError


class RateLimiter:
    """Sliding-window limiter keyed by user id."""

    def __init__(
        self,
        enabled: bool = False,
        max_requests: int = 20,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.enabled = enabled
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}

    @classmethod
    def from_settings(cls, settings: ChatSettings) -> "RateLimiter":
        return cls(
            enabled=settings.rate_limit_enabled,
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )

    @property
    def tracked_users(self) -> int:
        return len(self._hits)

    def _evict_idle(self, now: float) -> None:
        """Forget users whose newest request has left the window."""
        cutoff = now - self.window_seconds
        for user_id in [user for user, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[user_id]

    def check(self, user_id: str) -> None:
        """
        Record a request for a user.

        Raises:
            RateLimitExceededError: The user already used up the window
        """
        if not self.enabled:
            return
        now = self._clock()
        self._evict_idle(now)
        hits = self._hits.setdefault(user_id, deque())
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()
        if len(hits) >= self.max_requests:
            retry_after = hits[0] + self.window_seconds - now
            raise RateLimitExceededError(
                f"Rate limit exceeded. Try again in {max(int(retry_after + 0.999), 1)} seconds",
                details={"retry_after_seconds": round(retry_after, 2)},
            )
        hits.append(now)
