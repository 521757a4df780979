"""Comment component port definitions - protocols for dependencies."""

from typing import Protocol
from uuid import UUID

from src.domain.entities import Post
from src.ports.clock import ClockPort
from src.ports.repo import CommentRepoPort, StorageError, UserRepoPort


class PostLookupPort(Protocol):
    """The slice of the post repository the comment lifecycle reads."""

    def get_by_id(self, post_id: UUID) -> Post | None:
        ...


__all__ = [
    "CommentRepoPort",
    "PostLookupPort",
    "UserRepoPort",
    "ClockPort",
    "StorageError",
]
