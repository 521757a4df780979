"""
In-memory repositories.

Dict-backed implementations of the repository ports, used by the component
and regression tests. Conditional updates mirror the SQLite adapter: a
transition is applied only while the stored record is still in its source
state.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from src.domain.entities import Category, Comment, Post, SortOrder, Tag, User
from src.ports.repo import SlugTakenError


class InMemoryUserRepo:
    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}

    def get_by_id(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    def save(self, user: User) -> None:
        self._users.setdefault(user.id, user)


class InMemoryCategoryRepo:
    def __init__(self) -> None:
        self._categories: dict[UUID, Category] = {}

    def existing_ids(self, ids: Sequence[UUID]) -> set[UUID]:
        return {i for i in ids if i in self._categories}

    def list_active(self) -> list[Category]:
        return sorted(
            (c for c in self._categories.values() if c.is_active), key=lambda c: c.name
        )

    def save(self, category: Category) -> Category:
        self._categories[category.id] = category
        return category

    def get(self, category_id: UUID) -> Category | None:
        return self._categories.get(category_id)

    def find_by_slug(self, slug: str) -> Category | None:
        return next((c for c in self._categories.values() if c.slug == slug), None)


class InMemoryTagRepo:
    def __init__(self) -> None:
        self._tags: dict[UUID, Tag] = {}

    def existing_ids(self, ids: Sequence[UUID]) -> set[UUID]:
        return {i for i in ids if i in self._tags}

    def list_all(self) -> list[Tag]:
        return sorted(self._tags.values(), key=lambda t: t.name)

    def save(self, tag: Tag) -> Tag:
        self._tags[tag.id] = tag
        return tag

    def find_by_slug(self, slug: str) -> Tag | None:
        return next(
            (t for t in self._tags.values() if t.slug.lower() == slug.lower()), None
        )


class InMemoryPostRepo:
    """Post storage; reads categories and tags for filters and the publish check."""

    def __init__(
        self,
        categories: InMemoryCategoryRepo | None = None,
        tags: InMemoryTagRepo | None = None,
    ) -> None:
        self._posts: dict[UUID, Post] = {}
        self._categories = categories or InMemoryCategoryRepo()
        self._tags = tags or InMemoryTagRepo()

    def create(self, post: Post) -> Post:
        self._posts[post.id] = post
        return post

    def get_by_id(self, post_id: UUID) -> Post | None:
        return self._posts.get(post_id)

    def get_by_slug(self, slug: str, status: str = "published") -> Post | None:
        matches = [p for p in self._posts.values() if p.slug == slug and p.status == status]
        return max(matches, key=lambda p: p.created_at) if matches else None

    def slug_taken(self, slug: str, exclude_post_id: UUID) -> bool:
        return any(
            p.slug == slug and p.status == "published" and p.id != exclude_post_id
            for p in self._posts.values()
        )

    def count_active_categories(self, post_id: UUID) -> int:
        post = self._posts.get(post_id)
        if post is None:
            return 0
        active = 0
        for category_id in post.category_ids:
            category = self._categories.get(category_id)
            if category is not None and category.is_active:
                active += 1
        return active

    def update_draft(self, post: Post) -> bool:
        stored = self._posts.get(post.id)
        if stored is None or stored.status != "draft":
            return False
        self._posts[post.id] = post
        return True

    def mark_published(self, post: Post) -> bool:
        stored = self._posts.get(post.id)
        if stored is None or stored.status != "draft":
            return False
        if self.slug_taken(post.slug, exclude_post_id=post.id):
            raise SlugTakenError(post.slug)
        self._posts[post.id] = post
        return True

    def list_published(
        self,
        offset: int,
        limit: int,
        sort: SortOrder,
        category_slug: str | None = None,
        tag_slug: str | None = None,
    ) -> list[Post]:
        posts = self._published(category_slug, tag_slug)
        posts.sort(key=lambda p: (p.published_at, str(p.id)), reverse=sort == "newest")
        return posts[offset : offset + limit]

    def count_published(
        self, category_slug: str | None = None, tag_slug: str | None = None
    ) -> int:
        return len(self._published(category_slug, tag_slug))

    def list_all(self) -> list[Post]:
        return sorted(self._posts.values(), key=lambda p: p.created_at, reverse=True)

    def _published(self, category_slug: str | None, tag_slug: str | None) -> list[Post]:
        posts = [p for p in self._posts.values() if p.status == "published"]
        if category_slug:
            category = self._categories.find_by_slug(category_slug)
            posts = [p for p in posts if category is not None and category.id in p.category_ids]
        if tag_slug:
            tag = self._tags.find_by_slug(tag_slug)
            posts = [p for p in posts if tag is not None and tag.id in p.tag_ids]
        return posts


class InMemoryCommentRepo:
    def __init__(self) -> None:
        self._comments: dict[UUID, Comment] = {}

    def create(self, comment: Comment) -> Comment:
        self._comments[comment.id] = comment
        return comment

    def get_by_id(self, comment_id: UUID) -> Comment | None:
        return self._comments.get(comment_id)

    def mark_moderated(self, comment: Comment) -> bool:
        stored = self._comments.get(comment.id)
        if stored is None or stored.status != "pending":
            return False
        self._comments[comment.id] = comment
        return True

    def list_approved_top_level(
        self, post_id: UUID, offset: int, limit: int, sort: SortOrder
    ) -> list[Comment]:
        comments = self._approved_top_level(post_id)
        comments.sort(key=lambda c: (c.created_at, str(c.id)), reverse=sort == "newest")
        return comments[offset : offset + limit]

    def count_approved_top_level(self, post_id: UUID) -> int:
        return len(self._approved_top_level(post_id))

    def list_approved_replies(self, post_id: UUID, parent_comment_id: UUID) -> list[Comment]:
        replies = [
            c
            for c in self._comments.values()
            if c.post_id == post_id
            and c.parent_comment_id == parent_comment_id
            and c.status == "approved"
        ]
        return sorted(replies, key=lambda c: (c.created_at, str(c.id)))

    def list_pending(self) -> list[Comment]:
        pending = [c for c in self._comments.values() if c.status == "pending"]
        return sorted(pending, key=lambda c: (c.created_at, str(c.id)))

    def _approved_top_level(self, post_id: UUID) -> list[Comment]:
        return [
            c
            for c in self._comments.values()
            if c.post_id == post_id and c.status == "approved" and c.is_top_level
        ]
