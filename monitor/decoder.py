"""CSV access-log decoding.

The header is checked eagerly: a file that has a header but no rows would
otherwise never be validated, since rows are only decoded on demand.
"""

import csv
from typing import Iterator, TextIO

from monitor.models import Record

CSV_HEADERS = (
    "remotehost",
    "rfc931",
    "authuser",
    "date",
    "request",
    "status",
    "bytes",
)


class MonitorError(Exception):
    """Base class for errors that abort a monitoring run."""


class StructuralError(MonitorError):
    """The input does not have the expected shape (header)."""


class DecodeError(MonitorError):
    """A single row could not be turned into a Record."""

    def __init__(self, line: int, message: str):
        super().__init__(f"line {line}: {message}")
        self.line = line


def read_records(source: TextIO) -> Iterator[Record]:
    """Validate the header of *source* now, then decode rows lazily."""
    reader = csv.reader(_strip_bom(source), skipinitialspace=True)
    try:
        header = next(reader)
    except StopIteration:
        raise StructuralError("empty input, expected a CSV header") from None
    except (csv.Error, UnicodeDecodeError) as e:
        raise StructuralError(f"unreadable CSV header: {e}") from e

    header = tuple(h.strip() for h in header)
    if header != CSV_HEADERS:
        raise StructuralError(
            f"expected headers {list(CSV_HEADERS)}, but got {list(header)}"
        )
    return _decode_rows(reader)


def _strip_bom(lines):
    # Some editors write a byte-order mark before the first header column.
    first = True
    for line in lines:
        if first:
            line = line.lstrip("\ufeff")
            first = False
        yield line


def _decode_rows(reader) -> Iterator[Record]:
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except (csv.Error, UnicodeDecodeError) as e:
            raise DecodeError(reader.line_num, str(e)) from e
        if not row or row == [""]:
            continue  # blank line
        yield decode_row(row, reader.line_num)


def decode_row(row: list[str], line: int = 0) -> Record:
    """Turn one CSV row into a Record, raising DecodeError if malformed."""
    if len(row) != len(CSV_HEADERS):
        raise DecodeError(
            line, f"expected {len(CSV_HEADERS)} fields, got {len(row)}"
        )
    try:
        "".join(row).encode("utf-8")
    except UnicodeEncodeError:
        # Undecodable bytes kept as surrogates by errors="surrogateescape".
        raise DecodeError(line, "row is not valid UTF-8") from None
    remote_host, _rfc931, auth_user, date, request, status, size = row

    parts = request.split()
    if len(parts) != 3:
        raise DecodeError(line, f"malformed request {request!r}")
    method, resource, protocol = parts
    if not resource.startswith("/"):
        raise DecodeError(line, f"resource must start with '/': {resource!r}")

    timestamp = _parse_int(line, "date", date)
    size = _parse_int(line, "bytes", size)
    if size < 0:
        raise DecodeError(line, f"negative bytes {size}")

    return Record(
        remote_host=remote_host,
        auth_user=auth_user,
        timestamp=timestamp,
        method=method,
        resource=resource,
        protocol=protocol,
        status_code=_parse_int(line, "status", status),
        bytes=size,
    )


def _parse_int(line: int, name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise DecodeError(line, f"field '{name}' is not an integer: {value!r}") from None
