"""Fixed-capacity table for live tailing. Oldest rows fall off the front."""

import collections
import logging
import threading
from collections.abc import Mapping
from typing import Optional

from logframes.errors import InvalidCapacity, LogFrameError, MalformedStream
from logframes.models import ConversionReport, TailResponse
from logframes.stream_table import stream_rows
from logframes.table import Field, Table, stream_fields

logger = logging.getLogger(__name__)


class CircularTable(Table):
    """Thread-safe FIFO table backed by one bounded deque per column.

    The column set is fixed at construction. Once `capacity` rows are
    held, every appended row evicts the oldest one.
    """

    def __init__(self, capacity: int, fields: list[Field], ref_id: Optional[str] = None):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise InvalidCapacity(f"capacity must be a positive integer, got {capacity!r}")
        super().__init__(fields=[], ref_id=ref_id)
        self._capacity = capacity
        self._lock = threading.RLock()
        self._total_appended = 0
        for schema in fields:
            column = schema.copy_schema()
            column.values = collections.deque(maxlen=capacity)
            column.links = None
            self.fields.append(column)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def total_appended(self) -> int:
        """Rows ever appended, including evicted ones."""
        return self._total_appended

    @property
    def length(self) -> int:
        with self._lock:
            return super().length

    @property
    def is_full(self) -> bool:
        return self.length == self._capacity

    def add_field(self, new_field: Field) -> Field:
        raise LogFrameError("the column set of a circular table is fixed at construction")

    def append(self, rows) -> int:
        """Append row dicts in order; returns how many rows were evicted.

        Rows are matched to columns by name and a missing column gets an
        absent (None) cell. The whole batch is checked first so a bad row
        leaves the table unchanged.
        """
        batch = list(rows)
        for position, row in enumerate(batch):
            if not isinstance(row, Mapping):
                raise MalformedStream(f"row {position} must be a mapping, got {type(row).__name__}")

        with self._lock:
            before = super().length
            for row in batch:
                for column in self.fields:
                    column.values.append(row.get(column.name))
            self._total_appended += len(batch)
            evicted = before + len(batch) - super().length

        if evicted:
            logger.debug("Evicted %d rows from circular table (capacity %d)", evicted, self._capacity)
        return evicted

    def get(self, index: int) -> dict:
        with self._lock:
            return super().get(index)

    def rows(self) -> list[dict]:
        with self._lock:
            return super().rows()

    def to_dict(self) -> dict:
        with self._lock:
            return super().to_dict()


def new_tail_table(capacity: int, labels: Optional[dict] = None,
                   ref_id: Optional[str] = None) -> CircularTable:
    """Circular table with the standard stream columns, `labels` pinned on `line`."""
    return CircularTable(capacity, stream_fields(labels), ref_id=ref_id)


def _base_labels(table: Table) -> dict:
    # Labels pinned on `line` are not repeated per row.
    line = table.find_field("line")
    if line is None:
        return {}
    return dict(line.labels or {})


def append_tail_response(response, table: CircularTable) -> ConversionReport:
    """Convert a tail response into rows and append them to `table` in one call."""
    if not isinstance(response, TailResponse):
        response = TailResponse.from_dict(response)

    report = ConversionReport(dropped_entries=len(response.dropped_entries))
    base_labels = _base_labels(table)
    rows = []
    for stream in response.streams:
        rows.extend(stream_rows(stream, base_labels=base_labels, report=report))

    if rows:
        table.append(rows)
    if not report.ok:
        logger.warning("Tail response: %s", report.summary())
    if report.dropped_entries:
        logger.warning("Tail response reported %d dropped entries", report.dropped_entries)
    return report
