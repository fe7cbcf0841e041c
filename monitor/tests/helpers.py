"""Shared builders for records and CSV input."""

from monitor.models import Record

HEADER = '"remotehost","rfc931","authuser","date","request","status","bytes"\n'


def make_record(ts, resource="/api/user", status=200, size=100, host="10.0.0.1"):
    """Record with sane defaults; only the timestamp is required."""
    return Record(
        remote_host=host,
        auth_user="apache",
        timestamp=ts,
        method="GET",
        resource=resource,
        protocol="HTTP/1.0",
        status_code=status,
        bytes=size,
    )


def csv_row(ts, resource="/api/user", status=200, size=100, host="10.0.0.1"):
    return f'"{host}","-","apache",{ts},"GET {resource} HTTP/1.0",{status},{size}\n'


def csv_input(timestamps, **kwargs):
    return HEADER + "".join(csv_row(ts, **kwargs) for ts in timestamps)
