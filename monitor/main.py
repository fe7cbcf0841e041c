"""Access-log monitor: reads CSV access logs, prints stats and alerts.

Reads from a file (or stdin), runs the stats and alert monitors, and writes
their output lines to stdout (or --output). Lines can additionally be
published to a Kafka topic, and counters exposed for Prometheus.

Usage:
    python -m monitor.main sample_input.csv
    python -m monitor.main --alert-rate 5 --stats-window 30 < access.csv
    python -m monitor.main access.csv --kafka-topic monitor-output --metrics-port 9100
"""

import argparse
import logging
import sys
from contextlib import ExitStack

from confluent_kafka import KafkaException
from prometheus_client import start_http_server

from monitor.config import load_config
from monitor.decoder import MonitorError
from monitor.engine import run
from monitor.models import DEFAULT_CONFIG
from monitor.sinks import KafkaSink, TeeSink

logger = logging.getLogger("monitor")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="access-monitor",
        description="Traffic stats and high-traffic alerts for CSV access logs",
    )
    parser.add_argument("input", nargs="?", help="CSV access log (default: stdin)")
    parser.add_argument("--config", help="YAML file with monitor settings")
    parser.add_argument("--stats-window", type=int, help="Seconds per stats bucket")
    parser.add_argument("--alert-window", type=int, help="Seconds in the alert window")
    parser.add_argument("--alert-rate", type=float,
                        help="Requests/sec over the alert window that raise an alert")
    parser.add_argument("--max-timestamp-error", type=int,
                        dest="maximum_timestamp_error",
                        help="Seconds a record may lag the newest timestamp seen")
    parser.add_argument("--output", help="Write output lines here (default: stdout)")
    parser.add_argument("--kafka-topic", help="Also publish output lines to this topic")
    parser.add_argument("--bootstrap-servers", default="localhost:9092")
    parser.add_argument("--metrics-port", type=int,
                        help="Serve Prometheus metrics on this port")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def resolve_config(args):
    """Defaults, then the YAML file, then command-line flags."""
    config = DEFAULT_CONFIG
    if args.config:
        config = load_config(args.config)
    return config.replace(
        stats_window=args.stats_window,
        alert_window=args.alert_window,
        alert_rate=args.alert_rate,
        maximum_timestamp_error=args.maximum_timestamp_error,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.metrics_port:
        start_http_server(args.metrics_port)
        logger.info("metrics on :%d/metrics", args.metrics_port)

    with ExitStack() as stack:
        try:
            if args.input:
                source = stack.enter_context(open(
                    args.input, encoding="utf-8-sig", errors="surrogateescape", newline=""))
            else:
                source = sys.stdin
            sink = stack.enter_context(open(args.output, "w")) if args.output else sys.stdout
            if args.kafka_topic:
                kafka = KafkaSink(args.bootstrap_servers, args.kafka_topic)
                stack.callback(kafka.close)
                sink = TeeSink(sink, kafka)
        except (OSError, KafkaException) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        logger.info("monitoring %s  stats_window=%d alert_window=%d alert_rate=%s",
                    args.input or "<stdin>", config.stats_window,
                    config.alert_window, config.alert_rate)
        try:
            run(source, sink, config)
        except MonitorError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
    except BrokenPipeError:
        sys.exit(0)
