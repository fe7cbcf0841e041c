"""Chunked stats: traffic summaries over fixed, back-to-back buckets.

Buckets are half-open ``[start, start + stats_window)`` and aligned to the
first record's timestamp. A record that lands past the current bucket closes
it, along with any empty buckets in between, so silent gaps still produce
one "no traffic" line per bucket.
"""

import logging
from collections import Counter

from monitor import metrics
from monitor.models import Config, Record
from monitor.monitors import Monitor

logger = logging.getLogger(__name__)


class ChunkedStatsMonitor(Monitor):
    name = "chunked_stats"

    def __init__(self, config: Config):
        self.window = config.stats_window
        self.bucket_start: int | None = None
        self.bucket_end: int | None = None
        self._reset()

    def _reset(self) -> None:
        self.count = 0
        self.bytes = 0
        self.errors = 0
        self.sections: Counter[str] = Counter()

    def push(self, record: Record) -> list[str]:
        if self.bucket_start is None:
            self.bucket_start = record.timestamp
            self.bucket_end = record.timestamp + self.window

        output = []
        while record.timestamp >= self.bucket_end:
            output.append(self._summary())
            self.bucket_start = self.bucket_end
            self.bucket_end += self.window
            self._reset()

        self.count += 1
        self.bytes += record.bytes
        if record.status_code >= 400:
            self.errors += 1
        self.sections[record.section] += 1
        return output

    def flush(self) -> list[str]:
        if self.count == 0:
            return []
        return [self._summary()]

    def top_section(self) -> tuple[str, int] | None:
        """Busiest section in the current bucket; ties go to the smallest name."""
        if not self.sections:
            return None
        return min(self.sections.items(), key=lambda item: (-item[1], item[0]))

    def _summary(self) -> str:
        metrics.summaries_total.inc()
        logger.debug("closing bucket [%d, %d) with %d requests",
                     self.bucket_start, self.bucket_end, self.count)

        line = (f"Stats [{self.bucket_start}, {self.bucket_end}): "
                f"{self.count} requests, {self.bytes} bytes")
        top = self.top_section()
        if top is None:
            return f"{line}, no traffic"
        section, hits = top
        return f"{line}, {self.errors} errors, top section {section} ({hits} hits)"
