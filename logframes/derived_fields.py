"""Derived fields: regex matchers that pull extra columns out of log lines."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import jsonschema

from logframes.errors import InvalidMatcherConfig
from logframes.table import BASE_COLUMNS, Field, FieldType, Table

logger = logging.getLogger(__name__)

DERIVED_FIELD_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "matcherRegex": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1},
        "url": {"type": ["string", "null"]},
    },
    "required": ["matcherRegex", "name"],
    "additionalProperties": False,
}

VALUE_PLACEHOLDER = re.compile(r"\$\{__value\.(?:raw|text)\}")

_validator = jsonschema.Draft202012Validator(DERIVED_FIELD_SCHEMA)


@dataclass(frozen=True)
class DerivedField:
    name: str
    matcher: re.Pattern
    url: Optional[str] = None

    def extract(self, line: str) -> Optional[str]:
        """Group 1 of the first match if the pattern has groups, else the whole match."""
        match = self.matcher.search(line)
        if match is None:
            return None
        if self.matcher.groups:
            return match.group(1)
        return match.group(0)

    def render_link(self, value: str) -> Optional[str]:
        if not self.url:
            return None
        return VALUE_PLACEHOLDER.sub(lambda _: value, self.url)


def validate_derived_field(record) -> list[str]:
    """Return schema error messages for one config record (empty when valid)."""
    return [error.message for error in _validator.iter_errors(record)]


def load_derived_fields(records) -> list[DerivedField]:
    """Validate and compile `{matcherRegex, name, url?}` records.

    Every problem in every record is collected before raising
    InvalidMatcherConfig, so a broken config is reported in one go.
    """
    problems = []
    compiled = []
    for position, record in enumerate(records or []):
        if isinstance(record, DerivedField):
            compiled.append(record)
            continue
        errors = validate_derived_field(record)
        if errors:
            problems.extend(f"derived field {position}: {msg}" for msg in errors)
            continue
        if record["name"] in BASE_COLUMNS:
            problems.append(f"derived field {position}: name {record['name']!r} shadows a base column")
            continue
        try:
            matcher = re.compile(record["matcherRegex"])
        except re.error as exc:
            problems.append(f"derived field {position}: invalid matcherRegex {record['matcherRegex']!r}: {exc}")
            continue
        compiled.append(DerivedField(name=record["name"], matcher=matcher, url=record.get("url")))

    if problems:
        raise InvalidMatcherConfig("; ".join(problems), problems)
    return compiled


class DerivedFieldExtractor:
    """Adds one string column per derived field name to tables."""

    def __init__(self, derived_fields):
        self._fields = load_derived_fields(derived_fields)

    @property
    def fields(self) -> list[DerivedField]:
        return list(self._fields)

    def apply(self, table: Table) -> Table:
        """Fill derived columns from `table`'s `line` column, in place.

        Cells stay None where a matcher did not match; the `line` column
        and the other columns are left untouched.
        """
        if not self._fields:
            return table
        line_field = table.find_field("line")
        lines = line_field.values if line_field is not None else []

        columns = {}
        for derived in self._fields:
            column = columns.get(derived.name)
            if column is None:
                column = table.find_field(derived.name)
                if column is None:
                    column = table.add_field(Field(name=derived.name, type=FieldType.STRING))
                columns[derived.name] = column
            if derived.url:
                if column.links is None:
                    column.links = [None] * len(lines)
                link = {"url": derived.url, "title": ""}
                if link not in column.config.setdefault("links", []):
                    column.config["links"].append(link)

            matched = 0
            for index, line in enumerate(lines):
                value = derived.extract(line)
                if value is None:
                    continue
                column.values[index] = value
                if column.links is not None:
                    column.links[index] = derived.render_link(value)
                matched += 1
            logger.debug("Derived field %s matched %d of %d rows", derived.name, matched, len(lines))
        return table
