"""In-memory record store behind the development API.

Records are kept in their wire (camelCase) form so the router can return
them as-is.  The store enforces the same rules a real service would: ids
are assigned here, required text fields must be present, enum values must
be known and post status changes follow the workflow.
"""

from __future__ import annotations

import threading
from datetime import date
from typing import Any, Dict, List, Optional

from models.records import PostCategory, PostStatus, RecordKind, UserRole, UserStatus
from modules.management.kinds import profile_for
from modules.management.workflow import next_status
from services.errors import NotFoundError, ValidationError


def _today() -> str:
    return date.today().isoformat()


_ENUM_VALUES = {
    RecordKind.USER: {
        "role": {r.value for r in UserRole},
        "status": {s.value for s in UserStatus},
    },
    RecordKind.POST: {
        "category": {c.value for c in PostCategory},
        "status": {s.value for s in PostStatus},
    },
}


class RecordStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: Dict[RecordKind, List[Dict[str, Any]]] = {
            RecordKind.USER: [],
            RecordKind.POST: [],
        }
        self._next_id: Dict[RecordKind, int] = {RecordKind.USER: 1, RecordKind.POST: 1}

    # CRUD
    def list(self, kind: RecordKind) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(row) for row in self._rows[kind]]

    def get(self, kind: RecordKind, record_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._find(kind, record_id)
            return dict(row) if row else None

    def create(self, kind: RecordKind, data: Dict[str, Any]) -> Dict[str, Any]:
        profile = profile_for(kind)
        values = {name: str(data.get(name) or profile.defaults[name]) for name in profile.form_fields}
        self._validate(kind, values)
        with self._lock:
            row: Dict[str, Any] = {"id": self._next_id[kind], **values}
            self._next_id[kind] += 1
            if kind is RecordKind.USER:
                row["lastLogin"] = data.get("lastLogin")
            else:
                row["views"] = int(data.get("views") or 0)
            row["createdAt"] = data.get("createdAt") or _today()
            self._rows[kind].append(row)
            return dict(row)

    def update(self, kind: RecordKind, record_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        profile = profile_for(kind)
        changes = {
            name: str(data[name])
            for name in profile.form_fields
            if name in data and data[name] is not None
        }
        with self._lock:
            row = self._require(kind, record_id)
            merged = {name: row[name] for name in profile.form_fields}
            merged.update(changes)
            self._validate(kind, merged)
            row.update(changes)
            return dict(row)

    def delete(self, kind: RecordKind, record_id: int) -> None:
        with self._lock:
            row = self._require(kind, record_id)
            self._rows[kind].remove(row)

    # State transitions
    def transition_post(self, record_id: int, action: str) -> Dict[str, Any]:
        with self._lock:
            row = self._require(RecordKind.POST, record_id)
            row["status"] = next_status(row["status"], action).value
            return dict(row)

    # Utility functions
    def _find(self, kind: RecordKind, record_id: int) -> Optional[Dict[str, Any]]:
        for row in self._rows[kind]:
            if row["id"] == record_id:
                return row
        return None

    def _require(self, kind: RecordKind, record_id: int) -> Dict[str, Any]:
        row = self._find(kind, record_id)
        if row is None:
            raise NotFoundError(f"{profile_for(kind).label} {record_id} not found", record_id)
        return row

    def _validate(self, kind: RecordKind, values: Dict[str, str]) -> None:
        profile = profile_for(kind)
        missing = [name for name in profile.required if not values.get(name, "").strip()]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", tuple(missing))
        for name, allowed in _ENUM_VALUES[kind].items():
            if values.get(name, "") not in allowed:
                raise ValidationError(f"Invalid {name}: {values.get(name)!r}", (name,))


__all__ = ["RecordStore"]
