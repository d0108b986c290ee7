"""Nanosecond timestamp conversion. Loki encodes times as integer strings."""

from datetime import datetime, timedelta, timezone

from logframes.errors import InvalidTimestamp

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
NANOS_PER_MILLI = 1_000_000
# year 9999 needs 21 digits
MAX_NANOS_DIGITS = 32


def parse_nanos(nanos: str) -> int:
    """Parse a base-10 nanosecond string. Raises InvalidTimestamp."""
    if not isinstance(nanos, str):
        raise InvalidTimestamp(f"timestamp must be a string, got {type(nanos).__name__}")
    if not nanos.isdigit() or not nanos.isascii():
        raise InvalidTimestamp(f"not a non-negative integer timestamp: {nanos!r}")
    if len(nanos) > MAX_NANOS_DIGITS:
        raise InvalidTimestamp(f"timestamp out of range: {nanos[:MAX_NANOS_DIGITS]!r}...")
    return int(nanos)


def to_millis_iso(nanos: str) -> str:
    """Return the UTC ISO-8601 time for `nanos`, truncated to milliseconds.

    >>> to_millis_iso("1579857562021616000")
    '2020-01-24T09:19:22.021Z'
    """
    millis = parse_nanos(nanos) // NANOS_PER_MILLI
    try:
        moment = EPOCH + timedelta(milliseconds=millis)
    except OverflowError:
        raise InvalidTimestamp(f"timestamp out of range: {nanos!r}") from None
    return moment.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def passthrough_nanos(nanos: str) -> str:
    """Return the raw nanosecond string unchanged (full precision view)."""
    return nanos
