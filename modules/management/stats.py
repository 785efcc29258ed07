"""Summary counts shown above the records table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from models.records import Record, RecordKind, plain_value


@dataclass(frozen=True)
class StatEntry:
    label: str
    value: int
    variant: str = "primary"


@dataclass(frozen=True)
class EntityStats:
    total: int
    entries: list[StatEntry] = field(default_factory=list)


def _count(items: Sequence[Record], attr: str, value: str) -> int:
    return sum(1 for item in items if plain_value(getattr(item, attr, None)) == value)


def compute_stats(kind: RecordKind | str, items: Sequence[Record]) -> EntityStats:
    kind = RecordKind(kind)
    if kind is RecordKind.USER:
        entries = [
            StatEntry("Active", _count(items, "status", "active"), "success"),
            StatEntry("Inactive", _count(items, "status", "inactive"), "warning"),
            StatEntry("Suspended", _count(items, "status", "suspended"), "danger"),
            StatEntry("Admins", _count(items, "role", "admin"), "secondary"),
        ]
    else:
        entries = [
            StatEntry("Published", _count(items, "status", "published"), "success"),
            StatEntry("Draft", _count(items, "status", "draft"), "warning"),
            StatEntry("Archived", _count(items, "status", "archived"), "danger"),
            StatEntry("Total views", sum(int(getattr(item, "views", 0) or 0) for item in items), "secondary"),
        ]
    return EntityStats(total=len(items), entries=entries)


__all__ = ["StatEntry", "EntityStats", "compute_stats"]
