from datetime import UTC, datetime
from uuid import uuid4

import pytest

from src.adapters.clock import FixedClock
from src.adapters.memory.repos import (
    InMemoryCategoryRepo,
    InMemoryCommentRepo,
    InMemoryPostRepo,
    InMemoryTagRepo,
    InMemoryUserRepo,
)
from src.components.comments import (
    ApprovedModeration,
    CommentComponent,
    ListApprovedInput,
    ModerateCommentInput,
    SubmitCommentInput,
)
from src.components.posts import (
    CreateDraftInput,
    GetPublishedPostInput,
    PostComponent,
    PublishPostInput,
    UpdateDraftInput,
)
from src.domain.entities import Actor, Category, Role, User
from src.domain.slugs import slugify

START = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)
LONG_CONTENT = "x" * 120


class Cms:
    """Both components wired to one set of in-memory stores."""

    def __init__(self) -> None:
        self.clock = FixedClock(START)
        self.users = InMemoryUserRepo()
        self.categories = InMemoryCategoryRepo()
        self.tags = InMemoryTagRepo()
        self.posts_repo = InMemoryPostRepo(self.categories, self.tags)
        self.comments_repo = InMemoryCommentRepo()
        self.news = self.categories.save(Category(name="News", slug="news"))
        self.posts = PostComponent(self.posts_repo, self.categories, self.tags, self.clock)
        self.comments = CommentComponent(
            self.comments_repo, self.posts_repo, self.users, self.clock
        )

    def actor(self, role: Role) -> Actor:
        actor = Actor(id=uuid4(), email=f"{role.value}@example.com", role=role)
        self.users.save(User(id=actor.id, email=actor.email, role=actor.role))
        return actor

    def draft(self, actor: Actor, title="Hello World", content=LONG_CONTENT, categories=True):
        result = self.posts.run_create_draft(
            CreateDraftInput(
                actor=actor,
                title=title,
                content=content,
                category_ids=[str(self.news.id)] if categories else None,
            )
        )
        assert result.success, result.errors
        return result.post

    def publish(self, actor: Actor, post_id):
        self.clock.advance(minutes=1)
        return self.posts.run_publish(PublishPostInput(actor=actor, post_id=post_id))

    def submit(self, actor: Actor, post_id, content="Nice post!", parent=None):
        self.clock.advance(minutes=1)
        return self.comments.run_submit(
            SubmitCommentInput(
                actor=actor, post_id=post_id, content=content, parent_comment_id=parent
            )
        )

    def moderate(self, actor: Actor, comment_id, status="approved"):
        self.clock.advance(minutes=1)
        return self.comments.run_moderate(
            ModerateCommentInput(actor=actor, comment_id=comment_id, status=status)
        )


@pytest.fixture
def cms() -> Cms:
    return Cms()


def kind(result) -> str:
    assert not result.success
    return result.errors[0].kind


# --- Slugs ---


@pytest.mark.parametrize(
    "noisy",
    [
        "Hello World",
        "hello world",
        "HELLO   WORLD",
        "Hello,  World!",
        "  hello -- world  ",
        "Hello\u00a0World",
    ],
)
def test_slug_ignores_case_and_punctuation_noise(noisy):
    assert slugify(noisy) == "hello-world"


def test_drafts_never_check_slug_uniqueness(cms: Cms):
    editor = cms.actor(Role.EDITOR)

    first = cms.draft(editor)
    second = cms.draft(editor)

    assert first.slug == second.slug == "hello-world"
    assert first.id != second.id


def test_publishing_same_title_gets_suffixed_slugs(cms: Cms):
    admin = cms.actor(Role.ADMIN)
    drafts = [cms.draft(admin) for _ in range(3)]

    slugs = [cms.publish(admin, d.id).post.slug for d in drafts]

    assert slugs == ["hello-world", "hello-world-1", "hello-world-2"]


# --- Publish ordering and one-way transition ---


def test_missing_post_is_not_found_before_anything_else(cms: Cms):
    viewer = cms.actor(Role.VIEWER)

    assert kind(cms.publish(viewer, uuid4())) == "not_found"


def test_published_post_is_conflict_for_every_role(cms: Cms):
    admin = cms.actor(Role.ADMIN)
    post = cms.draft(admin)
    assert cms.publish(admin, post.id).success

    for role in Role:
        assert kind(cms.publish(cms.actor(role), post.id)) == "conflict"


def test_forbidden_before_content_checks(cms: Cms):
    owner = cms.actor(Role.EDITOR)
    post = cms.draft(owner, content="short", categories=False)

    assert kind(cms.publish(cms.actor(Role.EDITOR), post.id)) == "forbidden"
    assert kind(cms.publish(owner, post.id)) == "validation_failed"


def test_moderation_is_one_way(cms: Cms):
    admin = cms.actor(Role.ADMIN)
    post = cms.publish(admin, cms.draft(admin).id).post
    comment = cms.submit(cms.actor(Role.VIEWER), post.id).comment

    assert cms.moderate(admin, comment.id, "rejected").success
    for status in ("approved", "rejected", "spam"):
        assert kind(cms.moderate(admin, comment.id, status)) == "conflict"


# --- Ownership ---


def test_ownership(cms: Cms):
    owner = cms.actor(Role.EDITOR)
    stranger = cms.actor(Role.EDITOR)
    admin = cms.actor(Role.ADMIN)
    viewer = cms.actor(Role.VIEWER)

    mine = cms.draft(owner)
    assert kind(cms.publish(stranger, mine.id)) == "forbidden"
    assert cms.publish(owner, mine.id).success

    first = cms.submit(viewer, mine.id).comment
    second = cms.submit(viewer, mine.id).comment
    assert kind(cms.moderate(stranger, first.id)) == "forbidden"
    assert cms.moderate(owner, first.id).success
    assert cms.moderate(admin, second.id).success

    theirs = cms.draft(stranger)
    assert cms.publish(admin, theirs.id).success


# --- Visibility ---


def test_drafts_are_never_public(cms: Cms):
    editor = cms.actor(Role.EDITOR)
    post = cms.draft(editor)

    by_id = cms.posts.run_get_published(GetPublishedPostInput(post_id=post.id))
    by_slug = cms.posts.run_get_published(GetPublishedPostInput(slug=post.slug))

    assert kind(by_id) == "not_found"
    assert kind(by_slug) == "not_found"
    assert kind(cms.submit(editor, post.id)) == "not_found"
    assert kind(cms.comments.run_list_approved(ListApprovedInput(post_id=post.id))) == "not_found"


# --- Comment listing ---


def test_no_comments_means_zero_pages(cms: Cms):
    admin = cms.actor(Role.ADMIN)
    post = cms.publish(admin, cms.draft(admin).id).post
    cms.submit(cms.actor(Role.VIEWER), post.id)

    result = cms.comments.run_list_approved(ListApprovedInput(post_id=post.id))

    assert result.success
    assert result.threads == []
    assert result.pagination.total == 0
    assert result.pagination.total_pages == 0


@pytest.mark.parametrize("sort", ["newest", "oldest"])
def test_replies_are_oldest_first_for_any_sort(cms: Cms, sort):
    admin = cms.actor(Role.ADMIN)
    viewer = cms.actor(Role.VIEWER)
    post = cms.publish(admin, cms.draft(admin).id).post
    tops = [cms.submit(viewer, post.id, content=f"top {n}").comment for n in range(2)]
    for top in tops:
        cms.moderate(admin, top.id)
    replies = [
        cms.submit(viewer, post.id, content=f"reply {n}", parent=tops[0].id).comment
        for n in range(3)
    ]
    # Approve out of order
    for reply in reversed(replies):
        cms.moderate(admin, reply.id)

    result = cms.comments.run_list_approved(ListApprovedInput(post_id=post.id, sort=sort))

    threads = {t.content: t for t in result.threads}
    assert [r.content for r in threads["top 0"].replies] == ["reply 0", "reply 1", "reply 2"]
    assert threads["top 1"].replies == []
    expected = ["top 1", "top 0"] if sort == "newest" else ["top 0", "top 1"]
    assert [t.content for t in result.threads] == expected


# --- Scenarios ---


def test_short_draft_is_extended_then_published(cms: Cms):
    editor = cms.actor(Role.EDITOR)

    draft = cms.draft(editor, content="short", categories=False)
    assert kind(cms.publish(editor, draft.id)) == "validation_failed"

    updated = cms.posts.run_update_draft(
        UpdateDraftInput(
            actor=editor,
            post_id=draft.id,
            content=LONG_CONTENT,
            category_ids=[str(cms.news.id)],
        )
    )
    assert updated.success, updated.errors
    result = cms.publish(editor, draft.id)

    assert result.success
    assert result.post.id == draft.id
    assert result.post.status == "published"
    assert result.post.published_at == cms.clock.now()
    assert result.post.slug == "hello-world"


def test_comment_flow_from_draft_to_approval(cms: Cms):
    editor = cms.actor(Role.EDITOR)
    viewer = cms.actor(Role.VIEWER)
    post = cms.draft(editor)

    assert kind(cms.submit(viewer, post.id)) == "not_found"

    assert cms.publish(editor, post.id).success
    submitted = cms.submit(viewer, post.id)
    assert submitted.success
    assert submitted.comment.status == "pending"

    approved = cms.moderate(editor, submitted.comment.id)
    assert isinstance(approved.result, ApprovedModeration)
    assert approved.result.approved_at == cms.clock.now()
    assert approved.result.author.email == viewer.email

    assert kind(cms.moderate(editor, submitted.comment.id)) == "conflict"
