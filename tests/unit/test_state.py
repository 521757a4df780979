from datetime import UTC, datetime
from uuid import uuid4

import pytest

from src.domain.entities import Comment, Post
from src.domain.state import (
    InvalidTransitionError,
    can_transition_comment,
    can_transition_post,
    moderate,
    publish,
)

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


def make_post(**kwargs) -> Post:
    defaults = dict(title="Hello World", content="body", slug="hello-world", author_id=uuid4())
    defaults.update(kwargs)
    return Post(**defaults)


def make_comment(**kwargs) -> Comment:
    defaults = dict(post_id=uuid4(), author_id=uuid4(), content="Nice")
    defaults.update(kwargs)
    return Comment(**defaults)


def test_post_transitions_are_one_way():
    assert can_transition_post("draft", "published")
    assert not can_transition_post("published", "draft")
    assert not can_transition_post("draft", "archived")
    assert not can_transition_post("published", "published")


def test_publish_stamps_times_and_slug():
    post = make_post()
    published = publish(post, "hello-world-1", NOW)

    assert published.status == "published"
    assert published.slug == "hello-world-1"
    assert published.published_at == NOW
    assert published.updated_at == NOW
    # Original is untouched
    assert post.status == "draft"
    assert post.published_at is None


def test_publish_twice_raises():
    published = publish(make_post(), "hello-world", NOW)
    with pytest.raises(InvalidTransitionError):
        publish(published, "hello-world", NOW)


@pytest.mark.parametrize("target", ["approved", "rejected", "spam"])
def test_pending_moves_to_any_terminal(target):
    assert can_transition_comment("pending", target)
    moderated = moderate(make_comment(), target, NOW)
    assert moderated.status == target


def test_approved_at_only_when_approved():
    assert moderate(make_comment(), "approved", NOW).approved_at == NOW
    assert moderate(make_comment(), "rejected", NOW).approved_at is None
    assert moderate(make_comment(), "spam", NOW).approved_at is None


@pytest.mark.parametrize("source", ["approved", "rejected", "spam"])
def test_terminal_states_do_not_move(source):
    comment = make_comment(status=source)
    for target in ("approved", "rejected", "spam", "pending"):
        assert not can_transition_comment(source, target)
    with pytest.raises(InvalidTransitionError):
        moderate(comment, "approved", NOW)
