"""Sliding window of records over the trailing N seconds.

Deque-based: O(1) append, amortized O(1) eviction. The window's "now" is
always the newest record's timestamp, never the wall clock, so replaying
an old log gives the same answer as watching it live.
"""

from collections import deque

from monitor.models import Record


class SlidingWindow:
    __slots__ = ("max_age", "_buf")

    def __init__(self, max_age_seconds: int):
        self.max_age = max_age_seconds
        self._buf: deque[Record] = deque()

    def add(self, record: Record) -> None:
        """Append *record* and evict everything it pushes out of the window."""
        self._buf.append(record)
        self._evict(record.timestamp)

    def _evict(self, now: int) -> None:
        # Half-open window (now - max_age, now]: a record exactly max_age old is out.
        cutoff = now - self.max_age
        while self._buf and self._buf[0].timestamp <= cutoff:
            self._buf.popleft()

    def rate(self) -> float:
        """Average records per second over the full window length."""
        return len(self._buf) / self.max_age

    def __len__(self) -> int:
        return len(self._buf)
