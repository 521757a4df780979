from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from src.domain.entities import Category, Comment, Post, SortOrder, Tag, User


class StorageError(Exception):
    """Raised by repository adapters when the backing store fails."""


class SlugTakenError(Exception):
    """Raised by mark_published when another published post already holds the slug."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Slug '{slug}' is already published")


class UserRepoPort(Protocol):
    def get_by_id(self, user_id: UUID) -> User | None:
        ...

    def save(self, user: User) -> None:
        """Insert the user if unknown. Existing rows are left untouched."""
        ...


class CategoryRepoPort(Protocol):
    def existing_ids(self, ids: Sequence[UUID]) -> set[UUID]:
        """Return the subset of ids that exist."""
        ...

    def list_active(self) -> list[Category]:
        ...

    def save(self, category: Category) -> Category:
        ...


class TagRepoPort(Protocol):
    def existing_ids(self, ids: Sequence[UUID]) -> set[UUID]:
        ...

    def list_all(self) -> list[Tag]:
        ...

    def save(self, tag: Tag) -> Tag:
        ...


class PostRepoPort(Protocol):
    def create(self, post: Post) -> Post:
        """Insert the post and its category/tag links as one unit."""
        ...

    def get_by_id(self, post_id: UUID) -> Post | None:
        ...

    def get_by_slug(self, slug: str, status: str = "published") -> Post | None:
        ...

    def slug_taken(self, slug: str, exclude_post_id: UUID) -> bool:
        """True if a published post other than exclude_post_id holds the slug."""
        ...

    def count_active_categories(self, post_id: UUID) -> int:
        ...

    def update_draft(self, post: Post) -> bool:
        """
        Replace title, content, slug and category/tag links as one unit.

        Applied only while the stored row is still a draft; returns False
        otherwise.
        """
        ...

    def mark_published(self, post: Post) -> bool:
        """
        Persist a publish transition.

        Applied only while the stored row is still a draft. Returns False
        when another writer got there first. Raises SlugTakenError when a
        different published post claimed the slug in the meantime.
        """
        ...

    def list_published(
        self,
        offset: int,
        limit: int,
        sort: SortOrder,
        category_slug: str | None = None,
        tag_slug: str | None = None,
    ) -> list[Post]:
        ...

    def count_published(
        self, category_slug: str | None = None, tag_slug: str | None = None
    ) -> int:
        ...

    def list_all(self) -> list[Post]:
        ...


class CommentRepoPort(Protocol):
    def create(self, comment: Comment) -> Comment:
        ...

    def get_by_id(self, comment_id: UUID) -> Comment | None:
        ...

    def mark_moderated(self, comment: Comment) -> bool:
        """Persist a moderation result while the stored row is still pending."""
        ...

    def list_approved_top_level(
        self, post_id: UUID, offset: int, limit: int, sort: SortOrder
    ) -> list[Comment]:
        ...

    def count_approved_top_level(self, post_id: UUID) -> int:
        ...

    def list_approved_replies(self, post_id: UUID, parent_comment_id: UUID) -> list[Comment]:
        """Approved replies, oldest first."""
        ...

    def list_pending(self) -> list[Comment]:
        """Pending comments, oldest first."""
        ...
