"""Bulk conversion: many streams to many tables, with derived fields."""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from logframes.derived_fields import DerivedFieldExtractor
from logframes.errors import InvalidMatcherConfig
from logframes.models import ConversionReport, parse_streams
from logframes.stream_table import build_stream_table

logger = logging.getLogger(__name__)

LINE_FILTER = re.compile(r'(\|=|\|~|!=|!~)\s*(?:"((?:[^\\"]|\\.)*)"|`([^`]*)`)')


@dataclass
class MergeResult:
    tables: list = field(default_factory=list)
    max_lines_reached: bool = False
    report: ConversionReport = field(default_factory=ConversionReport)

    @property
    def total_rows(self) -> int:
        return sum(t.length for t in self.tables)


def highlighter_expressions(expr: Optional[str], regexp: Optional[str] = None) -> list[str]:
    """Regexes for the positive line filters of a query expression.

    `|= "x"` contributes the escaped literal, `|~ "x"` the regex as is;
    negative filters contribute nothing.
    """
    words = []
    for operator, quoted, raw in LINE_FILTER.findall(expr or ""):
        if operator.startswith("!"):
            continue
        term = raw if raw else quoted.replace('\\"', '"')
        if not term:
            continue
        words.append(term if operator == "|~" else re.escape(term))
    if regexp:
        words.append(regexp)
    return words


def _check_max_lines(max_lines):
    if isinstance(max_lines, bool) or not isinstance(max_lines, int) or max_lines < 1:
        raise InvalidMatcherConfig(f"max_lines must be a positive integer, got {max_lines!r}")


def streams_to_tables(streams, target_ref: Optional[str] = None, max_lines: int = 1000,
                      derived_fields=None, expr: Optional[str] = None,
                      regexp: Optional[str] = None, reverse: bool = False) -> MergeResult:
    """Build one table per stream and add derived field columns.

    Configuration (max_lines and derived_fields) is validated before any
    row is touched. `max_lines_reached` is advisory: no rows are dropped.
    """
    _check_max_lines(max_lines)
    extractor = DerivedFieldExtractor(derived_fields)

    result = MergeResult()
    search_words = highlighter_expressions(expr, regexp)
    for stream in parse_streams(streams):
        report = ConversionReport()
        table = build_stream_table(stream, reverse=reverse, ref_id=target_ref, report=report)
        extractor.apply(table)
        table.meta = {"limit": max_lines, "search_words": list(search_words)}
        result.tables.append(table)
        result.report.merge(report)

    result.max_lines_reached = result.total_rows >= max_lines
    if not result.report.ok:
        logger.warning("Query %s: %s", target_ref, result.report.summary())
    logger.debug("Built %d tables with %d rows (limit %d, reached=%s)",
                 len(result.tables), result.total_rows, max_lines, result.max_lines_reached)
    return result
