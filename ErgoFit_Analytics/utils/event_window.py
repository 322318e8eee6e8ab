"""Trailing time window of discrete event timestamps."""

from collections import deque
from typing import List, Optional


class EventWindow:
    """Keeps event timestamps (ms) younger than window_ms."""

    def __init__(self, window_ms: float = 1200.0):
        self.window_ms = window_ms
        self._events: deque = deque()
        self._last: Optional[float] = None

    def add(self, timestamp: float):
        self._events.append(timestamp)
        self._last = timestamp

    def prune(self, now: float):
        while self._events and now - self._events[0] >= self.window_ms:
            self._events.popleft()

    def get_events(self) -> List[float]:
        return list(self._events)

    @property
    def count(self) -> int:
        return len(self._events)

    @property
    def last(self) -> Optional[float]:
        """Most recent event ever added, even if pruned since."""
        return self._last

    def reset(self):
        self._events.clear()
        self._last = None
