# Monitors are plain Python classes behind one small interface.
#
# Each one observes the same ordered record stream independently and turns
# it into output lines. The dispatcher holds a fixed list of them and never
# needs to know which is which.


class Monitor:
    """Base monitor. Subclass and implement push() + flush()."""

    name: str

    def push(self, record) -> list[str]:
        """Observe one record (in timestamp order), return lines to emit."""
        raise NotImplementedError

    def flush(self) -> list[str]:
        """End of stream. Return any lines still owed."""
        return []


from monitor.monitors.chunked_stats import ChunkedStatsMonitor
from monitor.monitors.rolling_alerts import RollingAlertsMonitor


def build_monitors(config) -> list[Monitor]:
    """Fresh monitors in dispatch order: stats first, then alerts."""
    return [ChunkedStatsMonitor(config), RollingAlertsMonitor(config)]
