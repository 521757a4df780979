"""Post component models - frozen dataclass inputs and outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.domain.entities import Actor, Post
from src.domain.errors import LifecycleError
from src.domain.paging import Pagination


@dataclass(frozen=True)
class CreateDraftInput:
    """
    Input for creating a draft post.

    Fields arrive as decoded request values and are validated by the
    component, so they are typed loosely.
    """

    actor: Actor
    title: Any
    content: Any
    category_ids: Any = None
    tag_ids: Any = None


@dataclass(frozen=True)
class CreateDraftOutput:
    errors: list[LifecycleError]
    success: bool
    post: Post | None = None


@dataclass(frozen=True)
class UpdateDraftInput:
    """
    Edit a draft in place.

    None leaves a field unchanged; an empty list clears the links.
    """

    actor: Actor
    post_id: UUID
    title: Any = None
    content: Any = None
    category_ids: Any = None
    tag_ids: Any = None


@dataclass(frozen=True)
class UpdateDraftOutput:
    errors: list[LifecycleError]
    success: bool
    post: Post | None = None


@dataclass(frozen=True)
class PublishPostInput:
    actor: Actor
    post_id: UUID


@dataclass(frozen=True)
class PublishPostOutput:
    errors: list[LifecycleError]
    success: bool
    post: Post | None = None


@dataclass(frozen=True)
class GetPublishedPostInput:
    """Lookup by id or slug; exactly one should be set."""

    post_id: UUID | None = None
    slug: str | None = None


@dataclass(frozen=True)
class GetPublishedPostOutput:
    errors: list[LifecycleError]
    success: bool
    post: Post | None = None


@dataclass(frozen=True)
class ListPublishedInput:
    page: Any = 1
    limit: Any = None
    sort: Any = "newest"
    category_slug: str | None = None
    tag_slug: str | None = None


@dataclass(frozen=True)
class ListPublishedOutput:
    errors: list[LifecycleError]
    success: bool
    posts: list[Post] = field(default_factory=list)
    pagination: Pagination | None = None


@dataclass(frozen=True)
class ListAllPostsInput:
    actor: Actor


@dataclass(frozen=True)
class ListAllPostsOutput:
    errors: list[LifecycleError]
    success: bool
    posts: list[Post] = field(default_factory=list)
