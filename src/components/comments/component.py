"""
Comment component - submission, moderation and listings.

State machine:
- pending -> approved | rejected | spam (terminal, once)

Submit guards (in order): post published -> not_found; content valid ->
validation_failed; parent id shape -> validation_failed; parent is an
approved top-level comment on the same post -> not_found.

Moderate guards (in order): role may moderate at all -> forbidden; comment
exists -> not_found; still pending -> conflict; admin, or editor who wrote
the post -> forbidden; target status valid -> validation_failed.

Approved listing fetches replies per comment. A failed reply fetch degrades
that one comment to "no replies" instead of failing the listing.
"""

from __future__ import annotations

import logging
from uuid import UUID

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
    RepliesResult,
    Reply,
    SubmitCommentInput,
    SubmitCommentOutput,
)
from src.components.comments.ports import (
    ClockPort,
    CommentRepoPort,
    PostLookupPort,
    StorageError,
    UserRepoPort,
)
from src.domain import errors as err
from src.domain.entities import Comment, Post
from src.domain.paging import Pagination, offset_for
from src.domain.policy import Action, can, has_any_grant
from src.domain.state import InvalidTransitionError, moderate
from src.domain.validation import (
    validate_comment_content,
    validate_moderation_status,
    validate_parent_comment_id,
)
from src.rules.models import ContentRules, PageRules

logger = logging.getLogger(__name__)

CommentInput = SubmitCommentInput | ModerateCommentInput | ListApprovedInput | ListPendingInput
CommentOutput = SubmitCommentOutput | ModerateCommentOutput | ListApprovedOutput | ListPendingOutput

REPLIES_UNAVAILABLE = "Replies could not be loaded"


class CommentComponent:
    """Component for the comment lifecycle."""

    def __init__(
        self,
        comment_repo: CommentRepoPort,
        post_repo: PostLookupPort,
        user_repo: UserRepoPort,
        clock: ClockPort,
        content_rules: ContentRules | None = None,
        page_rules: PageRules | None = None,
    ) -> None:
        self._comments = comment_repo
        self._posts = post_repo
        self._users = user_repo
        self._clock = clock
        self._rules = content_rules or ContentRules()
        self._pages = page_rules or PageRules(default_limit=20, max_limit=100)

    def run(self, input_data: CommentInput) -> CommentOutput:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, SubmitCommentInput):
            return self.run_submit(input_data)
        elif isinstance(input_data, ModerateCommentInput):
            return self.run_moderate(input_data)
        elif isinstance(input_data, ListApprovedInput):
            return self.run_list_approved(input_data)
        elif isinstance(input_data, ListPendingInput):
            return self.run_list_pending(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    # --- Submit ---

    def run_submit(self, input_data: SubmitCommentInput) -> SubmitCommentOutput:
        """Submit a comment; it waits in pending until moderated."""
        actor = input_data.actor
        if not can(actor, Action.SUBMIT_COMMENT):
            return _submit_failed(
                err.forbidden("PERMISSION_DENIED", "Not allowed to comment", "actor")
            )

        try:
            post = self._posts.get_by_id(input_data.post_id)
            if not _is_published(post):
                return _submit_failed(err.not_found("POST_NOT_FOUND", "Post not found", "post_id"))

            content_check = validate_comment_content(
                input_data.content, self._rules.comment_max_length
            )
            if not content_check.valid:
                return _submit_failed(
                    err.invalid(
                        "VALIDATION_FAILED", content_check.error or "Invalid content", "content"
                    )
                )

            parent_check = validate_parent_comment_id(input_data.parent_comment_id)
            if not parent_check.valid:
                return _submit_failed(
                    err.invalid(
                        "VALIDATION_FAILED",
                        parent_check.error or "Invalid parent comment ID",
                        "parent_comment_id",
                    )
                )

            parent_id: UUID | None = None
            if input_data.parent_comment_id:
                parent_id = UUID(input_data.parent_comment_id)
                parent = self._comments.get_by_id(parent_id)
                if not _accepts_replies(parent, input_data.post_id):
                    return _submit_failed(
                        err.not_found(
                            "PARENT_NOT_FOUND", "Parent comment not found", "parent_comment_id"
                        )
                    )

            comment = Comment(
                post_id=input_data.post_id,
                author_id=actor.id,
                content=input_data.content.strip(),
                status="pending",
                parent_comment_id=parent_id,
                created_at=self._clock.now(),
                approved_at=None,
            )
            saved = self._comments.create(comment)
        except StorageError:
            logger.exception("Failed to submit comment on post %s", input_data.post_id)
            return _submit_failed(err.storage_failure())

        logger.info("Comment %s submitted on post %s by %s", saved.id, saved.post_id, actor.id)
        return SubmitCommentOutput(
            errors=[],
            success=True,
            comment=saved,
            author=AuthorRef(id=actor.id, email=actor.email),
        )

    # --- Moderate ---

    def run_moderate(self, input_data: ModerateCommentInput) -> ModerateCommentOutput:
        """Move a pending comment to approved, rejected or spam."""
        actor = input_data.actor
        if not has_any_grant(actor, Action.MODERATE_COMMENT):
            return _moderate_failed(
                err.forbidden(
                    "PERMISSION_DENIED", "Only admins and editors can moderate comments", "actor"
                )
            )

        try:
            comment = self._comments.get_by_id(input_data.comment_id)
            if comment is None:
                return _moderate_failed(
                    err.not_found("COMMENT_NOT_FOUND", "Comment not found", "comment_id")
                )

            if comment.status != "pending":
                return _moderate_failed(
                    err.conflict("ALREADY_MODERATED", "Comment already moderated", "status")
                )

            post = self._posts.get_by_id(comment.post_id)
            if post is None:
                logger.error("Comment %s references missing post %s", comment.id, comment.post_id)
                return _moderate_failed(err.storage_failure())

            if not can(actor, Action.MODERATE_COMMENT, resource=post):
                return _moderate_failed(
                    err.forbidden(
                        "PERMISSION_DENIED",
                        "Editors can only moderate comments on their own posts",
                        "actor",
                    )
                )

            status_check = validate_moderation_status(input_data.status)
            if not status_check.valid:
                return _moderate_failed(
                    err.invalid("INVALID_STATUS", status_check.error or "Invalid status", "status")
                )

            try:
                moderated = moderate(comment, input_data.status, self._clock.now())
            except InvalidTransitionError:
                return _moderate_failed(
                    err.conflict("ALREADY_MODERATED", "Comment already moderated", "status")
                )

            if not self._comments.mark_moderated(moderated):
                return _moderate_failed(
                    err.conflict("ALREADY_MODERATED", "Comment already moderated", "status")
                )

            result: ApprovedModeration | RejectedModeration
            if moderated.status == "approved" and moderated.approved_at is not None:
                result = ApprovedModeration(
                    id=moderated.id,
                    post_id=moderated.post_id,
                    author=self._author_ref(moderated.author_id, {}),
                    content=moderated.content,
                    status="approved",
                    created_at=moderated.created_at,
                    approved_at=moderated.approved_at,
                )
            else:
                result = RejectedModeration(
                    id=moderated.id,
                    post_id=moderated.post_id,
                    content=moderated.content,
                    status=input_data.status,
                )
        except StorageError:
            logger.exception("Failed to moderate comment %s", input_data.comment_id)
            return _moderate_failed(err.storage_failure())

        logger.info("Comment %s moderated as %s by %s", moderated.id, moderated.status, actor.id)
        return ModerateCommentOutput(errors=[], success=True, result=result)

    # --- Listings ---

    def run_list_approved(self, input_data: ListApprovedInput) -> ListApprovedOutput:
        """Public listing of approved top-level comments with their replies."""
        page = _coerce_positive(input_data.page, 1)
        limit = min(
            _coerce_positive(input_data.limit, self._pages.default_limit), self._pages.max_limit
        )
        sort = input_data.sort if input_data.sort in ("newest", "oldest") else "oldest"

        try:
            post = self._posts.get_by_id(input_data.post_id)
            if not _is_published(post):
                return ListApprovedOutput(
                    errors=[err.not_found("POST_NOT_FOUND", "Post not found", "post_id")],
                    success=False,
                )

            comments = self._comments.list_approved_top_level(
                input_data.post_id, offset_for(page, limit), limit, sort
            )
            total = self._comments.count_approved_top_level(input_data.post_id)

            authors: dict[UUID, AuthorRef] = {}
            threads = [
                CommentThread(
                    id=c.id,
                    post_id=c.post_id,
                    author=self._author_ref(c.author_id, authors),
                    content=c.content,
                    status=c.status,
                    parent_comment_id=c.parent_comment_id,
                    created_at=c.created_at,
                    replies_result=self._fetch_replies(c, authors),
                )
                for c in comments
            ]
        except StorageError:
            logger.exception("Failed to list comments for post %s", input_data.post_id)
            return ListApprovedOutput(errors=[err.storage_failure()], success=False)

        return ListApprovedOutput(
            errors=[],
            success=True,
            threads=threads,
            pagination=Pagination.build(page, limit, total),
        )

    def run_list_pending(self, input_data: ListPendingInput) -> ListPendingOutput:
        """Admin-only moderation queue, oldest first, unpaginated."""
        if not can(input_data.actor, Action.LIST_PENDING_COMMENTS):
            return ListPendingOutput(
                errors=[
                    err.forbidden("PERMISSION_DENIED", "Only admins can view pending comments")
                ],
                success=False,
            )

        try:
            authors: dict[UUID, AuthorRef] = {}
            pending = [
                PendingComment(
                    id=c.id,
                    post_id=c.post_id,
                    content=c.content,
                    author=self._author_ref(c.author_id, authors),
                    created_at=c.created_at,
                )
                for c in self._comments.list_pending()
            ]
        except StorageError:
            logger.exception("Failed to list pending comments")
            return ListPendingOutput(errors=[err.storage_failure()], success=False)

        return ListPendingOutput(errors=[], success=True, comments=pending)

    # --- Helpers ---

    def _fetch_replies(self, comment: Comment, authors: dict[UUID, AuthorRef]) -> RepliesResult:
        try:
            replies = self._comments.list_approved_replies(comment.post_id, comment.id)
            return RepliesOk(
                replies=[
                    Reply(
                        id=r.id,
                        author=self._author_ref(r.author_id, authors),
                        content=r.content,
                        created_at=r.created_at,
                    )
                    for r in sorted(replies, key=lambda r: r.created_at)
                ]
            )
        except StorageError as e:
            logger.warning("Replies for comment %s unavailable: %s", comment.id, e)
            return RepliesDegraded(reason=REPLIES_UNAVAILABLE)

    def _author_ref(self, user_id: UUID, cache: dict[UUID, AuthorRef]) -> AuthorRef:
        if user_id not in cache:
            user = self._users.get_by_id(user_id)
            cache[user_id] = AuthorRef(id=user_id, email=user.email if user else "")
        return cache[user_id]


def _is_published(post: Post | None) -> bool:
    return post is not None and post.status == "published"


def _accepts_replies(parent: Comment | None, post_id: UUID) -> bool:
    # Replies nest one level: the parent must itself be top-level.
    return (
        parent is not None
        and parent.post_id == post_id
        and parent.status == "approved"
        and parent.is_top_level
    )


def _coerce_positive(value: object, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = int(str(value))
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _submit_failed(error: err.LifecycleError) -> SubmitCommentOutput:
    return SubmitCommentOutput(errors=[error], success=False)


def _moderate_failed(error: err.LifecycleError) -> ModerateCommentOutput:
    return ModerateCommentOutput(errors=[error], success=False)


def run(
    input_data: CommentInput,
    comment_repo: CommentRepoPort,
    post_repo: PostLookupPort,
    user_repo: UserRepoPort,
    clock: ClockPort,
    content_rules: ContentRules | None = None,
    page_rules: PageRules | None = None,
) -> CommentOutput:
    """Convenience entry point - builds a component and runs one input."""
    component = CommentComponent(
        comment_repo, post_repo, user_repo, clock, content_rules, page_rules
    )
    return component.run(input_data)
