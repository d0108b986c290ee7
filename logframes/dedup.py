"""Caller-owned de-duplication of rows across overlapping fetches."""

import logging

from logframes.table import Table

logger = logging.getLogger(__name__)


class SeenIds:
    """Remembers row ids and drops rows whose id was already seen."""

    def __init__(self):
        self._ids = set()

    def __contains__(self, row_id):
        return row_id in self._ids

    def __len__(self):
        return len(self._ids)

    def add(self, row_id: str) -> bool:
        """Record `row_id`; True if it was new."""
        if row_id in self._ids:
            return False
        self._ids.add(row_id)
        return True

    def filter_rows(self, rows: list[dict]) -> list[dict]:
        return [row for row in rows if self.add(row["id"])]

    def filter_table(self, table: Table) -> Table:
        """A new table holding only the rows of `table` not seen before."""
        ids = table.find_field("id")
        keep = [i for i, row_id in enumerate(ids.values if ids else []) if self.add(row_id)]

        fresh = Table(ref_id=table.ref_id, meta=dict(table.meta), report=table.report)
        for column in table.fields:
            copy = column.copy_schema()
            copy.values = [column.values[i] for i in keep]
            if column.links is not None:
                copy.links = [column.links[i] for i in keep]
            fresh.fields.append(copy)

        dropped = table.length - len(keep)
        if dropped:
            logger.debug("Dropped %d duplicate rows", dropped)
        return fresh

    def clear(self):
        self._ids.clear()
