"""Record shapes managed by the admin window.

Two record kinds exist: users and posts. Both are plain frozen dataclasses
so a loaded collection can be handed to the table and form layers without
any risk of them being edited in place; the only way a record changes is a
round trip through the entity manager and a reload from the server.

Enum-typed fields hold the enum member when the server sends a known value
and the raw string otherwise.  Unknown values are displayed with a generic
badge instead of being rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Union


class RecordKind(str, Enum):
    USER = "user"
    POST = "post"


class UserRole(str, Enum):
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"
    GUEST = "guest"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class PostCategory(str, Enum):
    DEVELOPMENT = "development"
    DESIGN = "design"
    ACCESSIBILITY = "accessibility"
    NONE = ""


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


@dataclass(frozen=True, slots=True)
class UserRecord:
    id: int
    username: str = ""
    email: str = ""
    role: Union[UserRole, str] = UserRole.USER
    status: Union[UserStatus, str] = UserStatus.ACTIVE
    last_login: Optional[str] = None
    created_at: str = ""


@dataclass(frozen=True, slots=True)
class PostRecord:
    id: int
    title: str = ""
    content: str = ""
    author: str = ""
    category: Union[PostCategory, str] = PostCategory.NONE
    status: Union[PostStatus, str] = PostStatus.DRAFT
    views: int = 0
    created_at: str = ""


Record = Union[UserRecord, PostRecord]


# Fields that may be edited through the create/edit form.  Everything else
# (id, timestamps, counters) is owned by the server.
MUTABLE_FIELDS: dict[RecordKind, tuple[str, ...]] = {
    RecordKind.USER: ("username", "email", "role", "status"),
    RecordKind.POST: ("title", "content", "author", "category", "status"),
}

_RECORD_TYPES: dict[RecordKind, type] = {
    RecordKind.USER: UserRecord,
    RecordKind.POST: PostRecord,
}

_ENUM_FIELDS: dict[RecordKind, dict[str, type[Enum]]] = {
    RecordKind.USER: {"role": UserRole, "status": UserStatus},
    RecordKind.POST: {"category": PostCategory, "status": PostStatus},
}


def record_type_for(kind: RecordKind) -> type:
    return _RECORD_TYPES[RecordKind(kind)]


def record_kind_of(record: Record) -> RecordKind:
    for kind, cls in _RECORD_TYPES.items():
        if isinstance(record, cls):
            return kind
    raise TypeError(f"Not a managed record: {record!r}")


def field_names(kind: RecordKind) -> tuple[str, ...]:
    return tuple(f.name for f in fields(record_type_for(kind)))


def enum_fields(kind: RecordKind) -> dict[str, type[Enum]]:
    return dict(_ENUM_FIELDS[RecordKind(kind)])


def coerce_enum(enum_cls: type[Enum], value: object) -> Union[Enum, str]:
    """Return the enum member for ``value`` or the value itself as text."""

    if isinstance(value, enum_cls):
        return value
    text = "" if value is None else str(value)
    try:
        return enum_cls(text)
    except ValueError:
        return text


def plain_value(value: object) -> object:
    """Unwrap enum members so values compare and print as their wire text."""

    if isinstance(value, Enum):
        return value.value
    return value


def record_to_dict(record: Record) -> dict[str, object]:
    return {f.name: plain_value(getattr(record, f.name)) for f in fields(record)}


__all__ = [
    "RecordKind",
    "UserRole",
    "UserStatus",
    "PostCategory",
    "PostStatus",
    "UserRecord",
    "PostRecord",
    "Record",
    "MUTABLE_FIELDS",
    "record_type_for",
    "record_kind_of",
    "field_names",
    "enum_fields",
    "coerce_enum",
    "plain_value",
    "record_to_dict",
]
