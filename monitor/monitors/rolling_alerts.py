"""Rolling alerts: high-traffic detector over a trailing window.

Two states, Normal and Alerting. The average rate is the number of records
in ``(now - alert_window, now]`` divided by ``alert_window``, where "now" is
the newest record's timestamp. Only transitions produce output: a sustained
burst raises one alert, not one per request.
"""

import logging

from monitor import metrics
from monitor.models import Config, Record
from monitor.monitors import Monitor
from monitor.sliding_window import SlidingWindow

logger = logging.getLogger(__name__)


class RollingAlertsMonitor(Monitor):
    name = "rolling_alerts"

    def __init__(self, config: Config):
        self.threshold = config.alert_rate
        self.window = SlidingWindow(config.alert_window)
        self.alerting = False

    def push(self, record: Record) -> list[str]:
        self.window.add(record)
        rate = self.window.rate()

        if not self.alerting and rate > self.threshold:
            self.alerting = True
            metrics.alert_transitions_total.labels(state="alerting").inc()
            logger.debug("alert raised at %d (rate %.2f)", record.timestamp, rate)
            return [f"High traffic generated an alert - hits = {rate:.2f}/s, "
                    f"triggered at {record.timestamp}"]

        if self.alerting and rate <= self.threshold:
            self.alerting = False
            metrics.alert_transitions_total.labels(state="recovered").inc()
            logger.debug("alert recovered at %d (rate %.2f)", record.timestamp, rate)
            return [f"High traffic alert recovered - hits = {rate:.2f}/s, "
                    f"recovered at {record.timestamp}"]

        return []

    # flush() is inherited: an alert still open at end of input stays open.
