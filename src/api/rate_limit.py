"""Simple in-memory rate limiting helpers."""

import threading
import time
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimit:
    max_requests: int
    window_seconds: int


class InMemoryRateLimiter:
    """Sliding-window limiter keyed by arbitrary strings (route:caller).

    Keys with no request inside the window are dropped, at the latest on
    the first call after one full window has passed.
    """

    def __init__(self, limit: RateLimit):
        self._limit = limit
        self._events: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep: float | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def _prune(self, key: str, window_start: float) -> deque[float] | None:
        events = self._events.get(key)
        if events is None:
            return None
        while events and events[0] <= window_start:
            events.popleft()
        if not events:
            del self._events[key]
            return None
        return events

    def _sweep(self, timestamp: float, window_start: float):
        if self._last_sweep is not None and timestamp - self._last_sweep < self._limit.window_seconds:
            return
        self._last_sweep = timestamp
        for key in list(self._events):
            self._prune(key, window_start)

    def allow(self, key: str, now: float | None = None) -> bool:
        timestamp = now if now is not None else time.monotonic()
        window_start = timestamp - self._limit.window_seconds
        with self._lock:
            self._sweep(timestamp, window_start)
            events = self._prune(key, window_start)
            if events is None:
                self._events[key] = deque([timestamp])
                return True

            if len(events) >= self._limit.max_requests:
                return False

            events.append(timestamp)
            return True
