"""
Post component - draft creation and editing, publishing and public reads.

State machine:
- draft -> published (one way, once)
- drafts may be edited any number of times; published posts may not

Publish guards, checked in order, first failure wins:
1. post exists                          -> not_found
2. post is a draft                      -> conflict
3. admin, or editor who wrote the post  -> forbidden
4. content long enough                  -> validation_failed
5. at least one active category linked  -> validation_failed
6. a free slug within the attempt bound -> conflict

Public reads only ever return published posts.
"""

from __future__ import annotations

import logging
from uuid import UUID

from src.components.posts.models import (
    CreateDraftInput,
    CreateDraftOutput,
    GetPublishedPostInput,
    GetPublishedPostOutput,
    ListAllPostsInput,
    ListAllPostsOutput,
    ListPublishedInput,
    ListPublishedOutput,
    PublishPostInput,
    PublishPostOutput,
    UpdateDraftInput,
    UpdateDraftOutput,
)
from src.components.posts.ports import (
    CategoryRepoPort,
    ClockPort,
    PostRepoPort,
    SlugTakenError,
    StorageError,
    TagRepoPort,
)
from src.domain import errors as err
from src.domain.entities import Post
from src.domain.paging import Pagination, offset_for
from src.domain.policy import Action, can
from src.domain.slugs import SlugExhaustedError, resolve_unique_slug, slugify
from src.domain.state import InvalidTransitionError, publish
from src.domain.validation import (
    validate_content,
    validate_content_for_publish,
    validate_identifier_list,
    validate_title,
)
from src.rules.models import ContentRules, PageRules

logger = logging.getLogger(__name__)

PostInput = (
    CreateDraftInput
    | UpdateDraftInput
    | PublishPostInput
    | GetPublishedPostInput
    | ListPublishedInput
)
PostOutput = (
    CreateDraftOutput
    | UpdateDraftOutput
    | PublishPostOutput
    | GetPublishedPostOutput
    | ListPublishedOutput
)

POST_NOT_FOUND = "Post not found"


class PostComponent:
    """Component for the post lifecycle."""

    def __init__(
        self,
        post_repo: PostRepoPort,
        category_repo: CategoryRepoPort,
        tag_repo: TagRepoPort,
        clock: ClockPort,
        content_rules: ContentRules | None = None,
        page_rules: PageRules | None = None,
    ) -> None:
        self._posts = post_repo
        self._categories = category_repo
        self._tags = tag_repo
        self._clock = clock
        self._rules = content_rules or ContentRules()
        self._pages = page_rules or PageRules(default_limit=10, max_limit=50)

    def run(self, input_data: PostInput | ListAllPostsInput) -> PostOutput | ListAllPostsOutput:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, CreateDraftInput):
            return self.run_create_draft(input_data)
        elif isinstance(input_data, UpdateDraftInput):
            return self.run_update_draft(input_data)
        elif isinstance(input_data, PublishPostInput):
            return self.run_publish(input_data)
        elif isinstance(input_data, GetPublishedPostInput):
            return self.run_get_published(input_data)
        elif isinstance(input_data, ListPublishedInput):
            return self.run_list_published(input_data)
        elif isinstance(input_data, ListAllPostsInput):
            return self.run_list_all(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    # --- Create ---

    def run_create_draft(self, input_data: CreateDraftInput) -> CreateDraftOutput:
        """Create a post in draft. Slugs are not checked for uniqueness here."""
        actor = input_data.actor
        if not can(actor, Action.CREATE_POST):
            return CreateDraftOutput(
                errors=[
                    err.forbidden(
                        "PERMISSION_DENIED", "Only editors and admins can create posts", "actor"
                    )
                ],
                success=False,
            )

        checks = [
            (
                "title",
                validate_title(input_data.title, self._rules.title.min, self._rules.title.max),
            ),
            ("content", validate_content(input_data.content)),
            ("category_ids", validate_identifier_list(input_data.category_ids, "category_ids")),
            ("tag_ids", validate_identifier_list(input_data.tag_ids, "tag_ids")),
        ]
        for field_name, result in checks:
            if not result.valid:
                return CreateDraftOutput(
                    errors=[
                        err.invalid(
                            "VALIDATION_FAILED", result.error or "Invalid input", field_name
                        )
                    ],
                    success=False,
                )

        category_ids = _dedupe_ids(input_data.category_ids)
        tag_ids = _dedupe_ids(input_data.tag_ids)

        try:
            reference_error = self._check_references(category_ids, tag_ids)
            if reference_error is not None:
                return CreateDraftOutput(errors=[reference_error], success=False)

            now = self._clock.now()
            post = Post(
                title=input_data.title,
                content=input_data.content,
                slug=slugify(input_data.title),
                author_id=actor.id,
                status="draft",
                published_at=None,
                created_at=now,
                updated_at=now,
                category_ids=category_ids,
                tag_ids=tag_ids,
            )
            saved = self._posts.create(post)
        except StorageError:
            logger.exception("Failed to create draft post for author %s", actor.id)
            return CreateDraftOutput(errors=[err.storage_failure()], success=False)

        logger.info("Draft post %s created by %s", saved.id, actor.id)
        return CreateDraftOutput(errors=[], success=True, post=saved)

    # --- Update ---

    def run_update_draft(self, input_data: UpdateDraftInput) -> UpdateDraftOutput:
        """
        Edit a draft's title, content or links.

        Guards run in publish order (exists, draft, ownership) before the
        field validators. The slug follows the title, unchecked as at creation.
        """
        actor = input_data.actor

        try:
            post = self._posts.get_by_id(input_data.post_id)
            if post is None:
                return _update_failed(err.not_found("POST_NOT_FOUND", POST_NOT_FOUND, "post_id"))

            if post.status != "draft":
                return _update_failed(
                    err.conflict("NOT_DRAFT", "Only draft posts can be edited", "status")
                )

            if not can(actor, Action.EDIT_DRAFT, resource=post):
                return _update_failed(
                    err.forbidden(
                        "PERMISSION_DENIED",
                        "Only admins, or editors editing their own posts, can edit drafts",
                        "actor",
                    )
                )

            title = post.title if input_data.title is None else input_data.title
            content = post.content if input_data.content is None else input_data.content
            checks = [
                ("title", validate_title(title, self._rules.title.min, self._rules.title.max)),
                ("content", validate_content(content)),
                (
                    "category_ids",
                    validate_identifier_list(input_data.category_ids, "category_ids"),
                ),
                ("tag_ids", validate_identifier_list(input_data.tag_ids, "tag_ids")),
            ]
            for field_name, result in checks:
                if not result.valid:
                    return _update_failed(
                        err.invalid(
                            "VALIDATION_FAILED", result.error or "Invalid input", field_name
                        )
                    )

            category_ids = (
                post.category_ids
                if input_data.category_ids is None
                else _dedupe_ids(input_data.category_ids)
            )
            tag_ids = (
                post.tag_ids if input_data.tag_ids is None else _dedupe_ids(input_data.tag_ids)
            )

            reference_error = self._check_references(category_ids, tag_ids)
            if reference_error is not None:
                return _update_failed(reference_error)

            revised = post.model_copy(
                update={
                    "title": title,
                    "content": content,
                    "slug": slugify(title),
                    "category_ids": category_ids,
                    "tag_ids": tag_ids,
                    "updated_at": self._clock.now(),
                }
            )
            if not self._posts.update_draft(revised):
                # Published by another request after our read.
                return _update_failed(
                    err.conflict("NOT_DRAFT", "Only draft posts can be edited", "status")
                )
        except StorageError:
            logger.exception("Failed to update draft post %s", input_data.post_id)
            return _update_failed(err.storage_failure())

        logger.info("Draft post %s updated by %s", revised.id, actor.id)
        return UpdateDraftOutput(errors=[], success=True, post=revised)

    def _check_references(
        self, category_ids: list[UUID], tag_ids: list[UUID]
    ) -> err.LifecycleError | None:
        if category_ids and self._categories.existing_ids(category_ids) != set(category_ids):
            return err.invalid(
                "INVALID_REFERENCE",
                "One or more category_ids reference non-existent categories",
                "category_ids",
            )
        if tag_ids and self._tags.existing_ids(tag_ids) != set(tag_ids):
            return err.invalid(
                "INVALID_REFERENCE",
                "One or more tag_ids reference non-existent tags",
                "tag_ids",
            )
        return None

    # --- Publish ---

    def run_publish(self, input_data: PublishPostInput) -> PublishPostOutput:
        """Publish a draft post."""
        actor = input_data.actor

        try:
            post = self._posts.get_by_id(input_data.post_id)
            if post is None:
                return _publish_failed(err.not_found("POST_NOT_FOUND", POST_NOT_FOUND, "post_id"))

            if post.status != "draft":
                return _publish_failed(
                    err.conflict("NOT_DRAFT", "Post is not in draft status", "status")
                )

            if not can(actor, Action.PUBLISH_POST, resource=post):
                return _publish_failed(
                    err.forbidden(
                        "PERMISSION_DENIED",
                        "Only admins, or editors publishing their own posts, can publish",
                        "actor",
                    )
                )

            content_check = validate_content_for_publish(
                post.content, self._rules.publish_min_content_length
            )
            if not content_check.valid:
                return _publish_failed(
                    err.invalid(
                        "CONTENT_TOO_SHORT", content_check.error or "Invalid content", "content"
                    )
                )

            if self._posts.count_active_categories(post.id) == 0:
                return _publish_failed(
                    err.invalid(
                        "CATEGORY_REQUIRED",
                        "Post must have at least one category to publish",
                        "category_ids",
                    )
                )

            try:
                slug = resolve_unique_slug(
                    slugify(post.title),
                    lambda candidate: self._posts.slug_taken(candidate, exclude_post_id=post.id),
                    self._rules.slug_max_attempts,
                )
            except SlugExhaustedError:
                return _publish_failed(
                    err.conflict(
                        "SLUG_EXHAUSTED", "Could not generate unique slug for this post", "slug"
                    )
                )

            try:
                published = publish(post, slug, self._clock.now())
            except InvalidTransitionError as e:
                return _publish_failed(err.conflict("NOT_DRAFT", str(e), "status"))

            if not self._posts.mark_published(published):
                # Another request published the post between our read and write.
                return _publish_failed(
                    err.conflict("NOT_DRAFT", "Post is not in draft status", "status")
                )
        except SlugTakenError as e:
            logger.info("Slug '%s' claimed during publish of post %s", e.slug, input_data.post_id)
            return _publish_failed(
                err.conflict(
                    "SLUG_CONFLICT",
                    "Slug was claimed by another post while publishing; try again",
                    "slug",
                )
            )
        except StorageError:
            logger.exception("Failed to publish post %s", input_data.post_id)
            return _publish_failed(err.storage_failure())

        logger.info("Post %s published as '%s' by %s", published.id, published.slug, actor.id)
        return PublishPostOutput(errors=[], success=True, post=published)

    # --- Reads ---

    def run_get_published(self, input_data: GetPublishedPostInput) -> GetPublishedPostOutput:
        """Public detail. Drafts are not found, whoever asks."""
        try:
            post: Post | None = None
            if input_data.post_id is not None:
                post = self._posts.get_by_id(input_data.post_id)
            elif input_data.slug:
                post = self._posts.get_by_slug(input_data.slug, status="published")
        except StorageError:
            logger.exception("Failed to read post")
            return GetPublishedPostOutput(errors=[err.storage_failure()], success=False)

        if post is None or post.status != "published":
            return GetPublishedPostOutput(
                errors=[err.not_found("POST_NOT_FOUND", POST_NOT_FOUND)], success=False
            )
        return GetPublishedPostOutput(errors=[], success=True, post=post)

    def run_list_published(self, input_data: ListPublishedInput) -> ListPublishedOutput:
        """Public listing with pagination and category/tag filters."""
        page = _as_int(input_data.page, 1)
        limit = _as_int(input_data.limit, self._pages.default_limit)

        if page is None or page < 1:
            return _list_failed(
                err.invalid("INVALID_PAGE", "Page must be a positive integer", "page")
            )
        if limit is None or limit < 1 or limit > self._pages.max_limit:
            return _list_failed(
                err.invalid(
                    "INVALID_LIMIT",
                    f"Limit must be between 1 and {self._pages.max_limit}",
                    "limit",
                )
            )
        sort = input_data.sort or "newest"
        if sort not in ("newest", "oldest"):
            return _list_failed(
                err.invalid("INVALID_SORT", 'Sort must be "newest" or "oldest"', "sort")
            )

        try:
            posts = self._posts.list_published(
                offset=offset_for(page, limit),
                limit=limit,
                sort=sort,
                category_slug=input_data.category_slug,
                tag_slug=input_data.tag_slug,
            )
            total = self._posts.count_published(
                category_slug=input_data.category_slug, tag_slug=input_data.tag_slug
            )
        except StorageError:
            logger.exception("Failed to list published posts")
            return _list_failed(err.storage_failure())

        return ListPublishedOutput(
            errors=[],
            success=True,
            posts=posts,
            pagination=Pagination.build(page, limit, total),
        )

    def run_list_all(self, input_data: ListAllPostsInput) -> ListAllPostsOutput:
        """Admin listing across every status."""
        if not can(input_data.actor, Action.LIST_ALL_POSTS):
            return ListAllPostsOutput(
                errors=[
                    err.forbidden("PERMISSION_DENIED", "Only admins can access this endpoint")
                ],
                success=False,
            )
        try:
            posts = self._posts.list_all()
        except StorageError:
            logger.exception("Failed to list posts for admin")
            return ListAllPostsOutput(errors=[err.storage_failure()], success=False)
        return ListAllPostsOutput(errors=[], success=True, posts=posts)


def _publish_failed(error: err.LifecycleError) -> PublishPostOutput:
    return PublishPostOutput(errors=[error], success=False)


def _update_failed(error: err.LifecycleError) -> UpdateDraftOutput:
    return UpdateDraftOutput(errors=[error], success=False)


def _list_failed(error: err.LifecycleError) -> ListPublishedOutput:
    return ListPublishedOutput(errors=[error], success=False)


def _dedupe_ids(values: list[str] | None) -> list[UUID]:
    ids: list[UUID] = []
    for value in values or []:
        uid = UUID(str(value))
        if uid not in ids:
            ids.append(uid)
    return ids


def _as_int(value: object, default: int) -> int | None:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except ValueError:
        return None


def run(
    input_data: PostInput | ListAllPostsInput,
    post_repo: PostRepoPort,
    category_repo: CategoryRepoPort,
    tag_repo: TagRepoPort,
    clock: ClockPort,
    content_rules: ContentRules | None = None,
    page_rules: PageRules | None = None,
) -> PostOutput | ListAllPostsOutput:
    """Convenience entry point - builds a component and runs one input."""
    component = PostComponent(
        post_repo, category_repo, tag_repo, clock, content_rules, page_rules
    )
    return component.run(input_data)
