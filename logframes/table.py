"""Column-oriented tables produced from log streams."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from logframes.errors import IndexOutOfRange
from logframes.models import ConversionReport

BASE_COLUMNS = ("ts", "tsNs", "line", "labels", "id")


class FieldType(str, Enum):
    TIME = "time"
    STRING = "string"
    OTHER = "other"


@dataclass
class Field:
    name: str
    type: FieldType = FieldType.STRING
    config: dict = field(default_factory=dict)
    labels: Optional[dict] = None
    values: list = field(default_factory=list)
    links: Optional[list] = None   # rendered per-row URLs, derived columns only

    def copy_schema(self) -> "Field":
        """Same name/type/config/labels with no values."""
        return Field(
            name=self.name,
            type=self.type,
            config=dict(self.config),
            labels=dict(self.labels) if self.labels is not None else None,
            links=[] if self.links is not None else None,
        )

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "type": self.type.value,
            "config": dict(self.config),
            "values": list(self.values),
        }
        if self.labels is not None:
            d["labels"] = dict(self.labels)
        if self.links is not None:
            d["links"] = list(self.links)
        return d


@dataclass
class Table:
    fields: list = field(default_factory=list)
    ref_id: Optional[str] = None
    meta: dict = field(default_factory=dict)
    report: Optional[ConversionReport] = field(default=None, compare=False, repr=False)

    @property
    def length(self) -> int:
        return len(self.fields[0].values) if self.fields else 0

    def __len__(self):
        return self.length

    def find_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def add_field(self, new_field: Field) -> Field:
        """Append a column, padding it with absent cells to the row count."""
        missing = self.length - len(new_field.values)
        if self.fields and missing > 0:
            new_field.values.extend([None] * missing)
            if new_field.links is not None:
                new_field.links.extend([None] * missing)
        self.fields.append(new_field)
        return new_field

    def get(self, index: int) -> dict:
        """Row at `index` as a {column: value} dict."""
        if not 0 <= index < self.length:
            raise IndexOutOfRange(f"row {index} out of range for table of {self.length} rows")
        return {f.name: f.values[index] for f in self.fields}

    def rows(self) -> list[dict]:
        return [self.get(i) for i in range(self.length)]

    def to_dict(self) -> dict:
        return {
            "refId": self.ref_id,
            "meta": dict(self.meta),
            "fields": [f.to_dict() for f in self.fields],
        }


def stream_fields(labels: Optional[dict] = None) -> list[Field]:
    """Empty `ts`, `tsNs`, `line`, `labels`, `id` columns; `labels` pinned on `line`."""
    return [
        Field(name="ts", type=FieldType.TIME, config={"title": "Time"}),
        Field(name="tsNs", type=FieldType.TIME, config={"title": "Time ns"}),
        Field(name="line", type=FieldType.STRING, labels=dict(labels) if labels is not None else None),
        Field(name="labels", type=FieldType.OTHER),
        Field(name="id", type=FieldType.STRING),
    ]
