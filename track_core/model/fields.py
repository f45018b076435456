"""Field identifiers and the ordered field list of a track."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True)
class Field:
    """Identifier for one column of point data."""

    name: str
    builtin: bool = False

    def __str__(self) -> str:
        return self.name


LATITUDE = Field("latitude", builtin=True)
LONGITUDE = Field("longitude", builtin=True)
ALTITUDE = Field("altitude", builtin=True)
TIMESTAMP = Field("timestamp", builtin=True)
WAYPT_NAME = Field("waypoint name", builtin=True)
WAYPT_TYPE = Field("waypoint type", builtin=True)
NEW_SEGMENT = Field("new segment", builtin=True)
DESCRIPTION = Field("description", builtin=True)

BUILTIN_FIELDS: tuple[Field, ...] = (
    LATITUDE,
    LONGITUDE,
    ALTITUDE,
    TIMESTAMP,
    WAYPT_NAME,
    WAYPT_TYPE,
    NEW_SEGMENT,
    DESCRIPTION,
)


class FieldList:
    """Ordered set of fields, kept in first-seen order without duplicates."""

    def __init__(self, fields: Iterable[Field] | None = None) -> None:
        self._fields: list[Field] = []
        for field in fields or ():
            self.extend(field)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __contains__(self, field: object) -> bool:
        return field in self._fields

    def __repr__(self) -> str:
        names = ", ".join(field.name for field in self._fields)
        return f"FieldList([{names}])"

    def contains(self, field: Field) -> bool:
        return field in self._fields

    def index_of(self, field: Field) -> int | None:
        try:
            return self._fields.index(field)
        except ValueError:
            return None

    def field_at(self, index: int) -> Field | None:
        if index < 0 or index >= len(self._fields):
            return None
        return self._fields[index]

    def fields(self) -> list[Field]:
        return list(self._fields)

    def extend(self, field: Field) -> bool:
        """Append ``field`` if it is not already present."""
        if field in self._fields:
            return False
        self._fields.append(field)
        return True

    def merge(self, other: "FieldList | Iterable[Field] | None") -> "FieldList":
        """Return a new list with this list's order, then unseen fields of ``other``."""
        merged = FieldList(self._fields)
        if other is not None:
            for field in other:
                merged.extend(field)
        return merged
