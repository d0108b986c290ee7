"""Convert one label-grouped log stream into a table of rows."""

import logging
from typing import Mapping, Optional

from logframes.errors import InvalidTimestamp, MalformedStream
from logframes.identity import digest, labels_string
from logframes.models import ConversionReport, LogStream, StreamEntry
from logframes.table import Table, stream_fields
from logframes.time_codec import passthrough_nanos, to_millis_iso

logger = logging.getLogger(__name__)


def find_unique_labels(labels: Mapping[str, str], base_labels: Mapping[str, str]) -> dict:
    """Labels whose key is absent from `base_labels` or whose value differs."""
    return {k: v for k, v in labels.items() if base_labels.get(k) != v}


def stream_rows(stream: LogStream, base_labels: Optional[Mapping[str, str]] = None,
                report: Optional[ConversionReport] = None) -> list[dict]:
    """Turn each entry of `stream` into a row dict, in input order.

    Entries with a bad shape or timestamp are skipped and recorded on
    `report` rather than aborting the stream.
    """
    if base_labels is None:
        base_labels = stream.labels
    unique = find_unique_labels(stream.labels, base_labels)
    serialized = labels_string(stream.labels)

    rows = []
    for position, pair in enumerate(stream.values):
        try:
            entry = StreamEntry.from_pair(pair)
            ts = to_millis_iso(entry.nanos)
        except (MalformedStream, InvalidTimestamp) as exc:
            if report is None:
                raise
            logger.debug("Skipping entry %d of stream %s: %s", position, serialized, exc)
            report.record(exc)
            continue

        rows.append({
            "ts": ts,
            "tsNs": passthrough_nanos(entry.nanos),
            "line": entry.line,
            "labels": dict(unique),
            "id": digest(entry.nanos, serialized, entry.line),
        })
    return rows


def build_stream_table(stream: LogStream, reverse: bool = False, ref_id: Optional[str] = None,
                       report: Optional[ConversionReport] = None) -> Table:
    """Build a `ts`/`tsNs`/`line`/`labels`/`id` table for one stream.

    The stream's labels are attached to the `line` column. Rows follow
    the order of `stream.values` (reversed when `reverse` is set).
    Skipped entries are counted on `table.report`.
    """
    own_report = report is None
    if own_report:
        report = ConversionReport()

    rows = stream_rows(stream, report=report)
    if reverse:
        rows.reverse()

    table = Table(fields=stream_fields(stream.labels), ref_id=ref_id, report=report)
    for f in table.fields:
        f.values.extend(row[f.name] for row in rows)

    if own_report and not report.ok:
        logger.warning("Stream %s: %s", labels_string(stream.labels), report.summary())
    return table
