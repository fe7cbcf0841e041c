"""Monitoring engine: drives ordered records through every monitor.

Pure pipeline logic, no CLI or Kafka dependency. ``run()`` wires the CSV
decoder, the reordering buffer and the monitors together; the CLI only
decides where input comes from and where lines go.
"""

import logging
from typing import TextIO

from monitor import metrics
from monitor.decoder import read_records
from monitor.models import Config, DEFAULT_CONFIG, Record
from monitor.monitors import Monitor, build_monitors
from monitor.sorted_records import sort_records

logger = logging.getLogger(__name__)


class MonitorEngine:

    def __init__(self, config: Config = DEFAULT_CONFIG,
                 monitors: list[Monitor] | None = None):
        self.config = config
        self.monitors = monitors if monitors is not None else build_monitors(config)

    def process(self, record: Record) -> list[str]:
        """Feed one ordered record to every monitor, in list order."""
        metrics.records_total.inc()
        lines = []
        for monitor in self.monitors:
            lines.extend(monitor.push(record))
        return lines

    def finish(self) -> list[str]:
        lines = []
        for monitor in self.monitors:
            lines.extend(monitor.flush())
        return lines


def run(source: TextIO, sink, config: Config = DEFAULT_CONFIG) -> None:
    """Read CSV records from *source*, write monitor output lines to *sink*.

    Raises StructuralError before anything is written if the header is
    wrong, and DecodeError at the first bad row. Lines already written to
    *sink* when a DecodeError surfaces stay written.
    """
    records = read_records(source)
    engine = MonitorEngine(config)

    processed = 0
    emitted = 0
    for record in sort_records(records, config):
        processed += 1
        for line in engine.process(record):
            sink.write(line + "\n")
            emitted += 1

    for line in engine.finish():
        sink.write(line + "\n")
        emitted += 1

    logger.info("processed %d records, emitted %d lines", processed, emitted)
