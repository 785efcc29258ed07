"""Badge and alert display mappings.

Unknown values are not an error: they fall back to a neutral
``secondary`` badge labelled with the raw value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from models.records import Record, RecordKind, plain_value, record_kind_of


@dataclass(frozen=True)
class BadgeConfig:
    variant: str
    label: str


_POST_STATUS = {
    "published": BadgeConfig("success", "Published"),
    "draft": BadgeConfig("warning", "Draft"),
    "archived": BadgeConfig("secondary", "Archived"),
}

_USER_STATUS = {
    "active": BadgeConfig("success", "Active"),
    "inactive": BadgeConfig("warning", "Inactive"),
    "suspended": BadgeConfig("danger", "Suspended"),
}

_USER_ROLE = {
    "admin": BadgeConfig("danger", "Admin"),
    "moderator": BadgeConfig("warning", "Moderator"),
    "user": BadgeConfig("primary", "User"),
    "guest": BadgeConfig("secondary", "Guest"),
}

_CATEGORY_VARIANTS = {
    "development": "primary",
    "design": "info",
    "accessibility": "danger",
}

_ALERT_TITLES = {
    "success": "Success",
    "error": "Error",
    "info": "Info",
    "warning": "Warning",
}

# Hex colours used by the Qt table to paint badge text.
VARIANT_COLORS = {
    "primary": "#1d4ed8",
    "secondary": "#6b7280",
    "success": "#15803d",
    "warning": "#b45309",
    "danger": "#b91c1c",
    "info": "#0e7490",
}


def _text(value: object) -> str:
    value = plain_value(value)
    return "" if value is None else str(value)


def _fallback(value: str) -> BadgeConfig:
    return BadgeConfig("secondary", value)


def post_status_badge(status: object) -> BadgeConfig:
    text = _text(status)
    return _POST_STATUS.get(text) or _fallback(text)


def user_status_badge(status: object) -> BadgeConfig:
    text = _text(status)
    return _USER_STATUS.get(text) or _fallback(text)


def user_role_badge(role: object) -> BadgeConfig:
    text = _text(role)
    return _USER_ROLE.get(text) or _fallback(text)


def category_badge(category: object) -> BadgeConfig:
    text = _text(category)
    variant = _CATEGORY_VARIANTS.get(text)
    return BadgeConfig(variant, text) if variant else _fallback(text)


def alert_title(alert_type: str) -> str:
    return _ALERT_TITLES.get(alert_type, "Notice")


_CELL_BADGES = {
    RecordKind.USER: {"role": user_role_badge, "status": user_status_badge},
    RecordKind.POST: {"category": category_badge, "status": post_status_badge},
}


def cell_display(record: Record, column: str) -> tuple[str, Optional[BadgeConfig]]:
    """Return the table text for ``column`` and the badge used to colour it."""

    if column == "actions":
        return "", None
    value = plain_value(getattr(record, column, None))
    mapper = _CELL_BADGES[record_kind_of(record)].get(column)
    if mapper is not None:
        badge = mapper(value)
        return badge.label, badge
    if column == "last_login":
        return (str(value) if value else "-"), None
    if column == "views":
        return f"{int(value or 0):,}", None
    return ("" if value is None else str(value)), None


__all__ = [
    "BadgeConfig",
    "VARIANT_COLORS",
    "cell_display",
    "post_status_badge",
    "user_status_badge",
    "user_role_badge",
    "category_badge",
    "alert_title",
]
