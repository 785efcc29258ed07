"""Post status workflow.

Posts cycle ``draft -> published -> archived -> draft``.  There is no terminal
state; deleting a post is a separate operation available from any status.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from models.records import PostStatus
from services.errors import InvalidTransitionError


class PostAction(str, Enum):
    PUBLISH = "publish"
    ARCHIVE = "archive"
    RESTORE = "restore"


TRANSITIONS: dict[tuple[PostStatus, PostAction], PostStatus] = {
    (PostStatus.DRAFT, PostAction.PUBLISH): PostStatus.PUBLISHED,
    (PostStatus.PUBLISHED, PostAction.ARCHIVE): PostStatus.ARCHIVED,
    (PostStatus.ARCHIVED, PostAction.RESTORE): PostStatus.DRAFT,
}

ACTION_LABELS: dict[PostAction, str] = {
    PostAction.PUBLISH: "Publish",
    PostAction.ARCHIVE: "Archive",
    PostAction.RESTORE: "Restore",
}

# Past-tense verbs used in the confirmation banner after an action succeeds.
ACTION_DONE: dict[PostAction, str] = {
    PostAction.PUBLISH: "published",
    PostAction.ARCHIVE: "archived",
    PostAction.RESTORE: "restored",
}


def _as_status(status: Union[PostStatus, str, None]) -> PostStatus | None:
    try:
        return PostStatus(status)
    except ValueError:
        return None


def _as_action(action: Union[PostAction, str]) -> PostAction:
    try:
        return PostAction(action)
    except ValueError:
        raise InvalidTransitionError(f"Unknown post action: {action!r}") from None


def can_transition(status: Union[PostStatus, str, None], action: Union[PostAction, str]) -> bool:
    current = _as_status(status)
    try:
        act = PostAction(action)
    except ValueError:
        return False
    return current is not None and (current, act) in TRANSITIONS


def next_status(status: Union[PostStatus, str, None], action: Union[PostAction, str]) -> PostStatus:
    act = _as_action(action)
    current = _as_status(status)
    target = TRANSITIONS.get((current, act)) if current is not None else None
    if target is None:
        shown = current.value if current is not None else status
        raise InvalidTransitionError(f"Cannot {act.value} a post in status '{shown}'")
    return target


def available_actions(status: Union[PostStatus, str, None]) -> list[PostAction]:
    """Actions the UI should offer for a post in ``status``."""

    current = _as_status(status)
    if current is None:
        return []
    return [act for (state, act) in TRANSITIONS if state is current]


__all__ = [
    "PostAction",
    "TRANSITIONS",
    "ACTION_LABELS",
    "ACTION_DONE",
    "can_transition",
    "next_status",
    "available_actions",
]
