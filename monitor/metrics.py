"""Prometheus counters for the monitoring pipeline.

Each counter registers itself in the default REGISTRY on construction;
``start_http_server()`` serves them on GET /metrics when the CLI is run
with ``--metrics-port``.
"""

from prometheus_client import Counter

records_total = Counter(
    "accessmon_records_total",
    "Records decoded and pushed through the monitors",
)
late_records_total = Counter(
    "accessmon_late_records_total",
    "Records that arrived later than maximum_timestamp_error allows",
)
summaries_total = Counter(
    "accessmon_summaries_total",
    "Bucket summaries emitted by the stats monitor",
)
alert_transitions_total = Counter(
    "accessmon_alert_transitions_total",
    "Alert state transitions",
    ["state"],
)
