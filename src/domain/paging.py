from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Pagination:
    """Page metadata. total_pages is 0 when there is nothing to show."""

    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> Pagination:
        total_pages = 0 if total == 0 else -(-total // limit)
        return cls(page=page, limit=limit, total=total, total_pages=total_pages)


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit
