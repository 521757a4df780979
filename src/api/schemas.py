from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

# --- Shared Enums/Types ---
PostStatus = Literal["draft", "published", "archived"]
CommentStatus = Literal["pending", "approved", "rejected", "spam"]


# --- Requests ---
# Fields are untyped so the lifecycle validation reports shape errors with
# its own messages instead of FastAPI's generic 422.


class PostCreateRequest(BaseModel):
    title: Any = None
    content: Any = None
    category_ids: Any = None
    tag_ids: Any = None


class PostUpdateRequest(BaseModel):
    """Omitted fields keep their current value."""

    title: Any = None
    content: Any = None
    category_ids: Any = None
    tag_ids: Any = None


class CommentCreateRequest(BaseModel):
    content: Any = None
    parent_comment_id: Any = None


class ModerationRequest(BaseModel):
    status: Any = None


# --- Shared ---
class AuthorResponse(BaseModel):
    id: UUID
    email: str

    model_config = ConfigDict(from_attributes=True)


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    model_config = ConfigDict(from_attributes=True)


# --- Posts ---
class PostResponse(BaseModel):
    id: UUID
    title: str
    content: str
    slug: str
    author_id: UUID
    status: PostStatus
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    category_ids: list[UUID] = []
    tag_ids: list[UUID] = []

    model_config = ConfigDict(from_attributes=True)


class PostListResponse(BaseModel):
    data: list[PostResponse]
    pagination: PaginationResponse


class PostCollectionResponse(BaseModel):
    data: list[PostResponse]


# --- Comments ---
class CommentResponse(BaseModel):
    id: UUID
    post_id: UUID
    author: AuthorResponse
    content: str
    status: CommentStatus
    parent_comment_id: UUID | None = None
    created_at: datetime


class ReplyResponse(BaseModel):
    id: UUID
    author: AuthorResponse
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentThreadResponse(CommentResponse):
    replies: list[ReplyResponse] = []


class CommentListResponse(BaseModel):
    data: list[CommentThreadResponse]
    pagination: PaginationResponse


class ApprovedModerationResponse(BaseModel):
    id: UUID
    post_id: UUID
    author: AuthorResponse
    content: str
    status: Literal["approved"]
    created_at: datetime
    approved_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RejectedModerationResponse(BaseModel):
    id: UUID
    post_id: UUID
    content: str
    status: Literal["rejected", "spam"]

    model_config = ConfigDict(from_attributes=True)


class PendingCommentResponse(BaseModel):
    id: UUID
    post_id: UUID
    content: str
    author: AuthorResponse
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PendingCommentListResponse(BaseModel):
    data: list[PendingCommentResponse]


# --- Reference data ---
class CategoryResponse(BaseModel):
    id: UUID
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class TagResponse(BaseModel):
    id: UUID
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class CategoryListResponse(BaseModel):
    data: list[CategoryResponse]


class TagListResponse(BaseModel):
    data: list[TagResponse]
