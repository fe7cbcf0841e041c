"""Synthetic CSV access-log generator.

Writes a steady baseline of requests with an optional burst in the middle,
so the stats and alert monitors have something realistic to chew on.
Timestamps get a small random jitter (never more than --jitter seconds) to
exercise the reordering buffer.

Usage:
    python generate.py > access.csv
    python generate.py --duration 600 --rate 4 --burst-start 200 --burst-length 150 --burst-rate 20
    python generate.py --seed 7 --start 1549573860 | python -m monitor.main
"""

import argparse
import csv
import random
import sys

from monitor.decoder import CSV_HEADERS

HOSTS = [f"10.0.0.{i}" for i in range(1, 6)]
USERS = ["apache", "-", "frank", "mary"]
RESOURCES = [
    "/api/user",
    "/api/help",
    "/report",
    "/report/daily",
    "/static/app.js",
    "/",
]
METHODS = ["GET", "GET", "GET", "POST"]
STATUSES = [200, 200, 200, 200, 201, 304, 404, 500]


def _rate_at(t, args) -> float:
    if args.burst_start <= t < args.burst_start + args.burst_length:
        return args.burst_rate
    return args.rate


def generate_rows(args, rng: random.Random):
    """Yield CSV rows (lists of strings) in arrival order.

    Each second gets a Poisson-ish request count around the rate in effect;
    arrival timestamps are jittered back by up to ``args.jitter`` seconds.
    """
    for offset in range(args.duration):
        t = args.start + offset
        expected = _rate_at(offset, args)
        count = int(expected) + (1 if rng.random() < expected - int(expected) else 0)
        for _ in range(count):
            ts = t - rng.randint(0, args.jitter) if args.jitter else t
            yield [
                rng.choice(HOSTS),
                "-",
                rng.choice(USERS),
                str(ts),
                f"{rng.choice(METHODS)} {rng.choice(RESOURCES)} HTTP/1.0",
                str(rng.choice(STATUSES)),
                str(rng.randint(200, 5000)),
            ]


def build_parser():
    parser = argparse.ArgumentParser(description="Synthetic access-log generator")
    parser.add_argument("--start", type=int, default=1549573860, help="First timestamp")
    parser.add_argument("--duration", type=int, default=300, help="Seconds of traffic")
    parser.add_argument("--rate", type=float, default=2, help="Baseline requests/sec")
    parser.add_argument("--burst-start", type=int, default=-1,
                        help="Seconds after --start the burst begins (-1: no burst)")
    parser.add_argument("--burst-length", type=int, default=0)
    parser.add_argument("--burst-rate", type=float, default=20)
    parser.add_argument("--jitter", type=int, default=1,
                        help="Max seconds a timestamp may lag (keep <= max timestamp error)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    rng = random.Random(args.seed)

    writer = csv.writer(sys.stdout, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    count = 0
    for row in generate_rows(args, rng):
        writer.writerow(row)
        count += 1
    print(f"Done. {count} requests generated.", file=sys.stderr)


if __name__ == "__main__":
    main()
