"""Reordering buffer for a nearly time-sorted record stream.

Records may arrive up to ``maximum_timestamp_error`` seconds behind the
largest timestamp seen so far (the watermark). Anything at or below
``watermark - maximum_timestamp_error`` can no longer be overtaken, so it is
released. Heap-based: O(log n) push and pop.
"""

import heapq
import itertools
import logging
from typing import Iterable, Iterator

from monitor import metrics
from monitor.models import Config, Record

logger = logging.getLogger(__name__)


class ReorderingBuffer:
    __slots__ = ("max_error", "watermark", "_heap", "_seq")

    def __init__(self, config: Config):
        self.max_error = config.maximum_timestamp_error
        self.watermark: int | None = None
        # (timestamp, arrival sequence, record): the sequence keeps ties stable
        # and stops heapq from ever comparing two Records.
        self._heap: list[tuple[int, int, Record]] = []
        self._seq = itertools.count()

    def push(self, record: Record) -> None:
        if self.watermark is not None and record.timestamp < self.watermark - self.max_error:
            # Tolerance violated: the record is still emitted, just out of order.
            logger.warning(
                "record at %d is more than %d seconds behind watermark %d",
                record.timestamp, self.max_error, self.watermark,
            )
            metrics.late_records_total.inc()
        if self.watermark is None or record.timestamp > self.watermark:
            self.watermark = record.timestamp
        heapq.heappush(self._heap, (record.timestamp, next(self._seq), record))

    def drain_ready(self) -> list[Record]:
        """Pop every record that no future arrival can precede."""
        if self.watermark is None:
            return []
        cutoff = self.watermark - self.max_error
        ready = []
        while self._heap and self._heap[0][0] <= cutoff:
            ready.append(self._pop())
        return ready

    def finish(self) -> list[Record]:
        """End of input: release everything still buffered."""
        remaining = []
        while self._heap:
            remaining.append(self._pop())
        return remaining

    def _pop(self) -> Record:
        return heapq.heappop(self._heap)[2]

    def __len__(self) -> int:
        return len(self._heap)


def sort_records(records: Iterable[Record], config: Config) -> Iterator[Record]:
    """Yield *records* in timestamp order, buffering only as much as needed."""
    buffer = ReorderingBuffer(config)
    for record in records:
        buffer.push(record)
        yield from buffer.drain_ready()
    yield from buffer.finish()
