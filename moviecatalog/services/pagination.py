"""
📄 Pagination
============

`normalize()` turns raw page/size inputs into safe bounds and `build_page()`
produces the uniform envelope. Envelope flags are derived from the counts in
one place so they always agree with each other.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple, TypeVar

from moviecatalog.core.exceptions import InvalidSearchParameter
from moviecatalog.schemas.pagination import Page

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


def normalize(
    page: Optional[int],
    size: Optional[int],
    *,
    default_size: int = DEFAULT_PAGE_SIZE,
    max_size: int = MAX_PAGE_SIZE,
) -> Tuple[int, int]:
    """
    Returns `(page, size)` with `page >= 0` and `1 <= size <= max_size`.

    A size outside the bounds is clamped; a negative page is an error.
    """
    page = 0 if page is None else int(page)
    size = default_size if size is None else int(size)
    if page < 0:
        raise InvalidSearchParameter("page", "must be greater than or equal to 0", value=page)
    return page, min(max(size, MIN_PAGE_SIZE), max_size)


def offset_of(page: int, size: int) -> int:
    return page * size


def total_pages_for(total: int, size: int) -> int:
    return math.ceil(total / size) if total > 0 else 0


def build_page(
    content: Sequence[T],
    *,
    page: int,
    size: int,
    total: int,
    sort: Optional[str] = None,
) -> Page:
    """Wrap one page of results plus consistent metadata."""
    total_pages = total_pages_for(total, size)
    has_next = page + 1 < total_pages
    items: List[T] = list(content)
    return Page(
        content=items,
        page=page,
        size=size,
        number_of_elements=len(items),
        total_elements=total,
        total_pages=total_pages,
        first=page == 0,
        last=not has_next,
        has_next=has_next,
        has_previous=page > 0,
        empty=not items,
        sort=sort,
    )


__all__ = [
    "normalize",
    "build_page",
    "offset_of",
    "total_pages_for",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
]
