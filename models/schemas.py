"""Wire schemas for the records service.

The service speaks camelCase JSON (``createdAt``, ``lastLogin``); the
``*Read`` models accept either spelling and convert to the in-memory
dataclasses from :mod:`models.records`.  Enum fields are plain strings here
so an unexpected value coming back from the server never fails a whole
collection load.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import (
    PostCategory,
    PostRecord,
    PostStatus,
    UserRecord,
    UserRole,
    UserStatus,
    coerce_enum,
)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UserBase(_WireModel):
    username: str = ""
    email: str = ""
    role: str = UserRole.USER.value
    status: str = UserStatus.ACTIVE.value


class UserCreate(UserBase):
    pass


class UserUpdate(_WireModel):
    username: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None


class UserRead(UserBase):
    id: int
    last_login: Optional[str] = Field(default=None, alias="lastLogin")
    created_at: str = Field(default="", alias="createdAt")

    def to_record(self) -> UserRecord:
        return UserRecord(
            id=self.id,
            username=self.username,
            email=self.email,
            role=coerce_enum(UserRole, self.role),
            status=coerce_enum(UserStatus, self.status),
            last_login=self.last_login or None,
            created_at=self.created_at,
        )


class PostBase(_WireModel):
    title: str = ""
    content: str = ""
    author: str = ""
    category: str = PostCategory.NONE.value
    status: str = PostStatus.DRAFT.value


class PostCreate(PostBase):
    pass


class PostUpdate(_WireModel):
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None


class PostRead(PostBase):
    id: int
    views: int = 0
    created_at: str = Field(default="", alias="createdAt")

    def to_record(self) -> PostRecord:
        return PostRecord(
            id=self.id,
            title=self.title,
            content=self.content,
            author=self.author,
            category=coerce_enum(PostCategory, self.category),
            status=coerce_enum(PostStatus, self.status),
            views=self.views,
            created_at=self.created_at,
        )


__all__ = [
    "UserBase",
    "UserCreate",
    "UserUpdate",
    "UserRead",
    "PostBase",
    "PostCreate",
    "PostUpdate",
    "PostRead",
]
