"""
Validation rules for post and comment input.

Pure predicates. Each returns a ValidationResult carrying a human-readable
reason on failure. Existence checks against storage are the caller's job.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

# --- Default Limits ---

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 200
PUBLISH_MIN_CONTENT_LENGTH = 100
COMMENT_MAX_LENGTH = 5000
MODERATION_STATUSES: tuple[str, ...] = ("approved", "rejected", "spam")

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None


OK = ValidationResult(valid=True)


def _fail(reason: str) -> ValidationResult:
    return ValidationResult(valid=False, error=reason)


def is_uuid(value: Any) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.match(value))


# --- Posts ---


def validate_title(
    title: Any,
    min_length: int = TITLE_MIN_LENGTH,
    max_length: int = TITLE_MAX_LENGTH,
) -> ValidationResult:
    if not title:
        return _fail("Title is required")
    if not isinstance(title, str):
        return _fail("Title must be a string")
    if len(title) < min_length:
        return _fail(f"Title must be at least {min_length} characters")
    if len(title) > max_length:
        return _fail(f"Title must be at most {max_length} characters")
    return OK


def validate_content(content: Any) -> ValidationResult:
    """Draft-time content check: present and not blank."""
    if not content:
        return _fail("Content is required")
    if not isinstance(content, str):
        return _fail("Content must be a string")
    if not content.strip():
        return _fail("Content cannot be empty")
    return OK


def validate_content_for_publish(
    content: Any, min_length: int = PUBLISH_MIN_CONTENT_LENGTH
) -> ValidationResult:
    if not content:
        return _fail("Content is required")
    if not isinstance(content, str):
        return _fail("Content must be a string")
    if len(content.strip()) < min_length:
        return _fail(f"Content must be at least {min_length} characters for publishing")
    return OK


def validate_identifier_list(ids: Any, label: str) -> ValidationResult:
    """
    Validate an optional list of identifiers (category_ids, tag_ids).

    Missing or empty is valid at draft time.
    """
    if ids is None:
        return OK
    if not isinstance(ids, list | tuple):
        return _fail(f"{label} must be an array")
    for value in ids:
        if not is_uuid(str(value)):
            return _fail(f"Invalid {label} UUID format")
    return OK


# --- Comments ---


def validate_comment_content(
    content: Any, max_length: int = COMMENT_MAX_LENGTH
) -> ValidationResult:
    if not content:
        return _fail("Comment content is required")
    if not isinstance(content, str):
        return _fail("Comment content must be a string")
    if not content.strip():
        return _fail("Comment content cannot be empty")
    if len(content) > max_length:
        return _fail(f"Comment content must be {max_length} characters or less")
    return OK


def validate_parent_comment_id(parent_id: Any) -> ValidationResult:
    if parent_id is None or parent_id == "":
        return OK
    if not isinstance(parent_id, str):
        return _fail("Parent comment ID must be a string")
    if not is_uuid(parent_id):
        return _fail("Invalid parent comment ID format")
    return OK


def validate_moderation_status(status: Any) -> ValidationResult:
    if not status or not isinstance(status, str):
        return _fail("Status is required")
    if status not in MODERATION_STATUSES:
        return _fail(f"Invalid status. Must be one of: {', '.join(MODERATION_STATUSES)}")
    return OK
