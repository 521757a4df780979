import pytest

from src.domain.slugs import SlugExhaustedError, candidate_slugs, resolve_unique_slug, slugify


@pytest.mark.parametrize(
    "title,slug",
    [
        ("Hello World", "hello-world"),
        ("  Hello,   World!  ", "hello-world"),
        ("C++ & Rust: a comparison", "c-rust-a-comparison"),
        ("already-slugged--title", "already-slugged-title"),
        ("snake_case stays", "snake_case-stays"),
        ("--Edges--", "edges"),
        ("!!!", ""),
        ("Hello\u00a0World", "hello-world"),
        ("Hello\u2003\u2003World", "hello-world"),
        ("Caf\u00e9 Society", "caf-society"),
    ],
)
def test_slugify(title, slug):
    assert slugify(title) == slug


def test_slugify_is_deterministic():
    assert slugify("Same Title") == slugify("Same Title")


def test_candidates():
    assert candidate_slugs("post", 3) == ["post", "post-1", "post-2"]


def test_first_free_candidate_wins():
    taken = {"post", "post-1"}
    assert resolve_unique_slug("post", taken.__contains__) == "post-2"


def test_free_base_is_returned_unchanged():
    assert resolve_unique_slug("post", lambda s: False) == "post"


def test_exhaustion_after_bound():
    tried = []

    def is_taken(candidate):
        tried.append(candidate)
        return True

    with pytest.raises(SlugExhaustedError) as exc:
        resolve_unique_slug("post", is_taken, max_attempts=10)

    assert len(tried) == 10
    assert tried[-1] == "post-9"
    assert exc.value.attempts == 10
