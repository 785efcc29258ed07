"""Per-kind capability profiles.

Everything that differs between users and posts (labels, form defaults,
required fields, table columns, which adapter talks to the server) is
collected on a :class:`KindProfile`.  Callers look the profile up by
:class:`~models.records.RecordKind` instead of branching on the kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import httpx

from models.records import MUTABLE_FIELDS, RecordKind
from services.remote_adapter import (
    PostServiceAdapter,
    RecordServiceAdapter,
    UserServiceAdapter,
)


@dataclass(frozen=True)
class ColumnSpec:
    key: str
    header: str
    sortable: bool = True


@dataclass(frozen=True)
class KindProfile:
    kind: RecordKind
    label: str
    plural: str
    defaults: dict[str, str]
    required: tuple[str, ...]
    columns: tuple[ColumnSpec, ...]
    field_labels: dict[str, str]
    choices: dict[str, tuple[tuple[str, str], ...]] = field(default_factory=dict)
    multiline: tuple[str, ...] = ()
    adapter_cls: Callable[[httpx.AsyncClient], RecordServiceAdapter] = RecordServiceAdapter
    supports_workflow: bool = False

    @property
    def form_fields(self) -> tuple[str, ...]:
        return MUTABLE_FIELDS[self.kind]

    def create_adapter(self, client: httpx.AsyncClient) -> RecordServiceAdapter:
        return self.adapter_cls(client)


USER_PROFILE = KindProfile(
    kind=RecordKind.USER,
    label="User",
    plural="Users",
    defaults={"username": "", "email": "", "role": "user", "status": "active"},
    required=("username", "email"),
    columns=(
        ColumnSpec("id", "ID"),
        ColumnSpec("username", "Username"),
        ColumnSpec("email", "Email"),
        ColumnSpec("role", "Role"),
        ColumnSpec("status", "Status"),
        ColumnSpec("created_at", "Created"),
        ColumnSpec("last_login", "Last login"),
        ColumnSpec("actions", "Actions", sortable=False),
    ),
    field_labels={
        "username": "Username",
        "email": "Email",
        "role": "Role",
        "status": "Status",
    },
    choices={
        "role": (("user", "User"), ("moderator", "Moderator"), ("admin", "Admin")),
        "status": (("active", "Active"), ("inactive", "Inactive"), ("suspended", "Suspended")),
    },
    adapter_cls=UserServiceAdapter,
)

POST_PROFILE = KindProfile(
    kind=RecordKind.POST,
    label="Post",
    plural="Posts",
    defaults={"title": "", "content": "", "author": "", "category": "", "status": "draft"},
    required=("title", "author"),
    columns=(
        ColumnSpec("id", "ID"),
        ColumnSpec("title", "Title"),
        ColumnSpec("author", "Author"),
        ColumnSpec("category", "Category"),
        ColumnSpec("status", "Status"),
        ColumnSpec("views", "Views"),
        ColumnSpec("created_at", "Created"),
        ColumnSpec("actions", "Actions", sortable=False),
    ),
    field_labels={
        "title": "Title",
        "content": "Content",
        "author": "Author",
        "category": "Category",
        "status": "Status",
    },
    choices={
        "category": (
            ("", "Select a category"),
            ("development", "Development"),
            ("design", "Design"),
            ("accessibility", "Accessibility"),
        ),
        "status": (("draft", "Draft"), ("published", "Published"), ("archived", "Archived")),
    },
    multiline=("content",),
    adapter_cls=PostServiceAdapter,
    supports_workflow=True,
)

_PROFILES: dict[RecordKind, KindProfile] = {
    RecordKind.USER: USER_PROFILE,
    RecordKind.POST: POST_PROFILE,
}


def profile_for(kind: RecordKind | str) -> KindProfile:
    return _PROFILES[RecordKind(kind)]


__all__ = ["ColumnSpec", "KindProfile", "USER_PROFILE", "POST_PROFILE", "profile_for"]
