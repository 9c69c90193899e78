from __future__ import annotations

import math
from typing import Sequence

from .domain.entities import Page, ParsedNote

ITEMS_PER_PAGE = 10


def total_pages(item_count: int, page_size: int = ITEMS_PER_PAGE) -> int:
    if page_size < 1:
        raise ValueError("page_size must be positive")
    return math.ceil(item_count / page_size)


def paginate(items: Sequence[ParsedNote], page_number: int, page_size: int = ITEMS_PER_PAGE) -> Page:
    """Return the 1-indexed ``page_number`` slice of ``items``.

    Pages outside ``1..total_pages`` are empty rather than an error.
    """
    pages = total_pages(len(items), page_size)
    if page_number < 1:
        return Page(items=[], page_number=page_number, page_size=page_size, total_pages=pages)
    start = (page_number - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page_number=page_number,
        page_size=page_size,
        total_pages=pages,
    )
