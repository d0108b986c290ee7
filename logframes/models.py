"""Input records for stream conversion, parsed from query/tail JSON."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Optional

from logframes.errors import MalformedStream


@dataclass(frozen=True)
class StreamEntry:
    nanos: str   # integer nanoseconds since epoch, as a string
    line: str

    @classmethod
    def from_pair(cls, pair) -> "StreamEntry":
        """Build an entry from a `[nanos, line]` pair. Raises MalformedStream."""
        if isinstance(pair, StreamEntry):
            return pair
        if isinstance(pair, (str, bytes)) or not isinstance(pair, Sequence):
            raise MalformedStream(f"stream entry must be a [timestamp, line] pair, got {pair!r}")
        if len(pair) < 2:
            raise MalformedStream(f"stream entry is missing its timestamp or line: {pair!r}")
        nanos, line = pair[0], pair[1]
        if nanos is None or line is None:
            raise MalformedStream(f"stream entry has an empty timestamp or line: {pair!r}")
        if not isinstance(line, str):
            raise MalformedStream(f"stream entry line must be a string: {pair!r}")
        return cls(nanos=nanos, line=line)


@dataclass(frozen=True)
class LogStream:
    """One label set and its ordered `[nanos, line]` values.

    Values are kept as received; each one is checked when it is turned
    into a row so one bad entry does not sink the whole stream.
    """
    labels: Mapping[str, str] = field(default_factory=dict)
    values: tuple = ()

    @classmethod
    def from_dict(cls, data) -> "LogStream":
        if not isinstance(data, Mapping):
            raise MalformedStream(f"stream must be an object, got {type(data).__name__}")
        labels = data.get("stream", {})
        values = data.get("values", [])
        if labels is None:
            labels = {}
        if not isinstance(labels, Mapping):
            raise MalformedStream("stream labels must be an object")
        if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
            raise MalformedStream("stream values must be a list of [timestamp, line] pairs")
        return cls(
            labels={str(k): str(v) for k, v in labels.items()},
            values=tuple(values),
        )


@dataclass(frozen=True)
class DroppedEntry:
    labels: Mapping[str, str]
    timestamp: str


@dataclass(frozen=True)
class TailResponse:
    streams: tuple = ()
    dropped_entries: tuple = ()

    @classmethod
    def from_dict(cls, data) -> "TailResponse":
        if not isinstance(data, Mapping):
            raise MalformedStream(f"tail response must be an object, got {type(data).__name__}")
        streams = tuple(LogStream.from_dict(s) for s in data.get("streams") or [])
        dropped = tuple(_dropped_entry(d) for d in data.get("dropped_entries") or [])
        return cls(streams=streams, dropped_entries=dropped)


def _dropped_entry(data) -> DroppedEntry:
    if not isinstance(data, Mapping):
        raise MalformedStream(f"dropped entry must be an object, got {type(data).__name__}")
    labels = data.get("labels") or {}
    if not isinstance(labels, Mapping):
        raise MalformedStream("dropped entry labels must be an object")
    return DroppedEntry(labels=dict(labels), timestamp=str(data.get("timestamp", "")))


def parse_streams(data) -> list[LogStream]:
    """Accept `{"streams": [...]}` or a bare list of stream objects."""
    if isinstance(data, Mapping):
        data = data.get("streams") or []
    return [s if isinstance(s, LogStream) else LogStream.from_dict(s) for s in data]


@dataclass
class ConversionReport:
    """Row-level failures collected during one conversion."""
    skipped: int = 0
    errors: list = field(default_factory=list)
    dropped_entries: int = 0

    @property
    def ok(self) -> bool:
        return self.skipped == 0

    @property
    def first_error(self) -> Optional[Exception]:
        return self.errors[0] if self.errors else None

    def record(self, error: Exception):
        self.skipped += 1
        self.errors.append(error)

    def merge(self, other: "ConversionReport") -> "ConversionReport":
        self.skipped += other.skipped
        self.errors.extend(other.errors)
        self.dropped_entries += other.dropped_entries
        return self

    def summary(self) -> str:
        if self.ok:
            return "no rows skipped"
        return f"{self.skipped} row(s) skipped, first error: {self.first_error}"
