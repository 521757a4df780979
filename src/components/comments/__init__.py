"""Comment component - submission, moderation and listings."""

from src.components.comments.component import CommentComponent, run
from src.components.comments.models import (
    ApprovedModeration,
    AuthorRef,
    CommentThread,
    ListApprovedInput,
    ListApprovedOutput,
    ListPendingInput,
    ListPendingOutput,
    ModerateCommentInput,
    ModerateCommentOutput,
    PendingComment,
    RejectedModeration,
    RepliesDegraded,
    RepliesOk,
    Reply,
    SubmitCommentInput,
    SubmitCommentOutput,
)
from src.components.comments.ports import ClockPort, CommentRepoPort, PostLookupPort, UserRepoPort

__all__ = [
    # Entry point
    "run",
    # Component
    "CommentComponent",
    # Models
    "AuthorRef",
    "SubmitCommentInput",
    "SubmitCommentOutput",
    "ModerateCommentInput",
    "ModerateCommentOutput",
    "ApprovedModeration",
    "RejectedModeration",
    "Reply",
    "RepliesOk",
    "RepliesDegraded",
    "CommentThread",
    "ListApprovedInput",
    "ListApprovedOutput",
    "PendingComment",
    "ListPendingInput",
    "ListPendingOutput",
    # Ports
    "CommentRepoPort",
    "PostLookupPort",
    "UserRepoPort",
    "ClockPort",
]
