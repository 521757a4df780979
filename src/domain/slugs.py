"""Slug generation and uniqueness resolution for posts."""

from __future__ import annotations

import re
from collections.abc import Callable

DEFAULT_MAX_ATTEMPTS = 10

_NON_SLUG_CHARS = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-+")


class SlugExhaustedError(Exception):
    """Raised when no free slug was found within the attempt bound."""

    def __init__(self, base: str, attempts: int) -> None:
        self.base = base
        self.attempts = attempts
        super().__init__(f"Could not generate unique slug for '{base}' in {attempts} attempts")


def slugify(title: str) -> str:
    """
    Convert a title to a URL-friendly slug.

    >>> slugify("Hello,  World!")
    'hello-world'
    """
    slug = title.lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")


def candidate_slugs(base: str, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> list[str]:
    """base, base-1, base-2, ... (max_attempts entries)."""
    return [base if n == 0 else f"{base}-{n}" for n in range(max_attempts)]


def resolve_unique_slug(
    base: str,
    is_taken: Callable[[str], bool],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> str:
    """
    Return the first candidate slug that is not taken.

    Args:
        base: Slug derived from the title
        is_taken: True if another published post holds the candidate
        max_attempts: Upper bound on candidates tried

    Raises:
        SlugExhaustedError: every candidate was taken
    """
    for candidate in candidate_slugs(base, max_attempts):
        if not is_taken(candidate):
            return candidate
    raise SlugExhaustedError(base, max_attempts)
