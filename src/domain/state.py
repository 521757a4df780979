from datetime import datetime
from typing import Any

from src.domain.entities import Comment, CommentStatus, Post, PostStatus

# Post: draft -> published. Archival exists in the schema only.
POST_TRANSITIONS: dict[PostStatus, tuple[PostStatus, ...]] = {
    "draft": ("published",),
    "published": (),
    "archived": (),
}

# Comment: pending -> one terminal state.
COMMENT_TRANSITIONS: dict[CommentStatus, tuple[CommentStatus, ...]] = {
    "pending": ("approved", "rejected", "spam"),
    "approved": (),
    "rejected": (),
    "spam": (),
}


class InvalidTransitionError(ValueError):
    """Raised when a state transition is not allowed."""

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot transition from '{from_status}' to '{to_status}'")


def can_transition_post(current: PostStatus, new: PostStatus) -> bool:
    return new in POST_TRANSITIONS.get(current, ())


def can_transition_comment(current: CommentStatus, new: CommentStatus) -> bool:
    return new in COMMENT_TRANSITIONS.get(current, ())


def publish(post: Post, slug: str, now: datetime) -> Post:
    """
    Return a NEW Post in the published state.
    Raises InvalidTransitionError unless the post is a draft.
    """
    if not can_transition_post(post.status, "published"):
        raise InvalidTransitionError(post.status, "published")

    updates: dict[str, Any] = {
        "status": "published",
        "slug": slug,
        "published_at": now,
        "updated_at": now,
    }
    return post.model_copy(update=updates)


def moderate(comment: Comment, target: CommentStatus, now: datetime) -> Comment:
    """
    Return a NEW Comment moved out of pending.
    approved_at is stamped only when approving.
    """
    if not can_transition_comment(comment.status, target):
        raise InvalidTransitionError(comment.status, target)

    updates: dict[str, Any] = {
        "status": target,
        "approved_at": now if target == "approved" else None,
    }
    return comment.model_copy(update=updates)
