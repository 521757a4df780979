"""Comment component models - frozen dataclass inputs and outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities import Actor, Comment, CommentStatus, ModerationTarget
from src.domain.errors import LifecycleError
from src.domain.paging import Pagination


@dataclass(frozen=True)
class AuthorRef:
    id: UUID
    email: str = ""


# --- Submit ---


@dataclass(frozen=True)
class SubmitCommentInput:
    actor: Actor
    post_id: UUID
    content: Any
    parent_comment_id: Any = None


@dataclass(frozen=True)
class SubmitCommentOutput:
    errors: list[LifecycleError]
    success: bool
    comment: Comment | None = None
    author: AuthorRef | None = None


# --- Moderate ---


@dataclass(frozen=True)
class ModerateCommentInput:
    actor: Actor
    comment_id: UUID
    status: Any


@dataclass(frozen=True)
class ApprovedModeration:
    """Full record returned when a comment is approved."""

    id: UUID
    post_id: UUID
    author: AuthorRef
    content: str
    status: ModerationTarget
    created_at: datetime
    approved_at: datetime


@dataclass(frozen=True)
class RejectedModeration:
    """Minimal record for rejected/spam: no author, no timestamps."""

    id: UUID
    post_id: UUID
    content: str
    status: ModerationTarget


@dataclass(frozen=True)
class ModerateCommentOutput:
    errors: list[LifecycleError]
    success: bool
    result: ApprovedModeration | RejectedModeration | None = None


# --- Approved listing ---


@dataclass(frozen=True)
class Reply:
    id: UUID
    author: AuthorRef
    content: str
    created_at: datetime


@dataclass(frozen=True)
class RepliesOk:
    replies: list[Reply]


@dataclass(frozen=True)
class RepliesDegraded:
    """Reply fetch failed; the comment is shown without replies."""

    reason: str
    replies: list[Reply] = field(default_factory=list)


RepliesResult = RepliesOk | RepliesDegraded


@dataclass(frozen=True)
class CommentThread:
    id: UUID
    post_id: UUID
    author: AuthorRef
    content: str
    status: CommentStatus
    parent_comment_id: UUID | None
    created_at: datetime
    replies_result: RepliesResult

    @property
    def replies(self) -> list[Reply]:
        return self.replies_result.replies


@dataclass(frozen=True)
class ListApprovedInput:
    post_id: UUID
    page: Any = None
    limit: Any = None
    sort: Any = None


@dataclass(frozen=True)
class ListApprovedOutput:
    errors: list[LifecycleError]
    success: bool
    threads: list[CommentThread] = field(default_factory=list)
    pagination: Pagination | None = None


# --- Pending listing ---


@dataclass(frozen=True)
class PendingComment:
    id: UUID
    post_id: UUID
    content: str
    author: AuthorRef
    created_at: datetime


@dataclass(frozen=True)
class ListPendingInput:
    actor: Actor


@dataclass(frozen=True)
class ListPendingOutput:
    errors: list[LifecycleError]
    success: bool
    comments: list[PendingComment] = field(default_factory=list)
