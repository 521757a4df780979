import pytest

from src.domain.paging import Pagination, offset_for


@pytest.mark.parametrize(
    "total,limit,pages",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (101, 20, 6)],
)
def test_total_pages(total, limit, pages):
    assert Pagination.build(1, limit, total).total_pages == pages


def test_offset():
    assert offset_for(1, 10) == 0
    assert offset_for(3, 20) == 40
