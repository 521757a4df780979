import pytest

from src.domain.validation import (
    is_uuid,
    validate_comment_content,
    validate_content,
    validate_content_for_publish,
    validate_identifier_list,
    validate_moderation_status,
    validate_parent_comment_id,
    validate_title,
)

VALID_ID = "3f2b8c1e-9d4a-4c7e-8f1a-2b3c4d5e6f70"


def test_uuid_shape():
    assert is_uuid(VALID_ID)
    assert is_uuid(VALID_ID.upper())
    assert not is_uuid("3f2b8c1e9d4a4c7e8f1a2b3c4d5e6f70")
    assert not is_uuid("not-a-uuid")
    assert not is_uuid(None)


@pytest.mark.parametrize(
    "title,error",
    [
        (None, "Title is required"),
        ("", "Title is required"),
        (123, "Title must be a string"),
        ("abcd", "Title must be at least 5 characters"),
        ("x" * 201, "Title must be at most 200 characters"),
    ],
)
def test_title_failures(title, error):
    result = validate_title(title)
    assert not result.valid
    assert result.error == error


def test_title_bounds_are_inclusive():
    assert validate_title("x" * 5).valid
    assert validate_title("x" * 200).valid


def test_title_limits_come_from_arguments():
    assert not validate_title("Hello", min_length=6).valid
    assert validate_title("Hello", min_length=6, max_length=10).valid is False
    assert validate_title("Hello!", min_length=6, max_length=10).valid


def test_draft_content():
    assert validate_content("short").valid
    assert validate_content("").error == "Content is required"
    assert validate_content(["a"]).error == "Content must be a string"
    assert validate_content(" \n\t ").error == "Content cannot be empty"


def test_publish_content_measures_trimmed_length():
    assert validate_content_for_publish("x" * 100).valid
    assert not validate_content_for_publish("x" * 99).valid
    assert not validate_content_for_publish("  " + "x" * 98 + "  ").valid
    assert validate_content_for_publish("x" * 50, min_length=50).valid


def test_identifier_list():
    assert validate_identifier_list(None, "category_ids").valid
    assert validate_identifier_list([], "category_ids").valid
    assert validate_identifier_list([VALID_ID], "category_ids").valid
    assert validate_identifier_list("x", "tag_ids").error == "tag_ids must be an array"
    assert validate_identifier_list([VALID_ID, "bad"], "tag_ids").error == (
        "Invalid tag_ids UUID format"
    )


def test_comment_content():
    assert validate_comment_content("x" * 5000).valid
    assert not validate_comment_content("x" * 5001).valid
    assert validate_comment_content("   ").error == "Comment content cannot be empty"
    assert validate_comment_content(None).error == "Comment content is required"
    assert not validate_comment_content("abc", max_length=2).valid


def test_parent_comment_id():
    assert validate_parent_comment_id(None).valid
    assert validate_parent_comment_id(VALID_ID).valid
    assert validate_parent_comment_id(7).error == "Parent comment ID must be a string"
    assert validate_parent_comment_id("nope").error == "Invalid parent comment ID format"


@pytest.mark.parametrize("status", ["approved", "rejected", "spam"])
def test_moderation_targets(status):
    assert validate_moderation_status(status).valid


@pytest.mark.parametrize("status", [None, "", "pending", "APPROVED", 1])
def test_moderation_rejects_others(status):
    assert not validate_moderation_status(status).valid
