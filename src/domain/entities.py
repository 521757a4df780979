from datetime import UTC, datetime
from enum import Enum
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---


class Role(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


PostStatus = Literal["draft", "published", "archived"]
CommentStatus = Literal["pending", "approved", "rejected", "spam"]
ModerationTarget = Literal["approved", "rejected", "spam"]
SortOrder = Literal["newest", "oldest"]


def utcnow() -> datetime:
    return datetime.now(UTC)


# --- Identity ---


class User(BaseModel):
    id: UUID
    email: str
    role: Role = Role.VIEWER
    created_at: datetime = Field(default_factory=utcnow)


class Actor(BaseModel):
    """Verified identity of the caller, as yielded by the identity gate."""

    id: UUID
    email: str = ""
    role: Role


# --- Reference data ---


class Category(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    slug: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)


class Tag(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    slug: str
    created_at: datetime = Field(default_factory=utcnow)


# --- Content ---


class Post(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    content: str
    slug: str
    author_id: UUID
    status: PostStatus = "draft"

    published_at: datetime | None = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    category_ids: list[UUID] = Field(default_factory=list)
    tag_ids: list[UUID] = Field(default_factory=list)


class Comment(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    post_id: UUID
    author_id: UUID
    content: str
    status: CommentStatus = "pending"
    parent_comment_id: UUID | None = None
    created_at: datetime = Field(default_factory=utcnow)
    approved_at: datetime | None = None

    @property
    def is_top_level(self) -> bool:
        return self.parent_comment_id is None
