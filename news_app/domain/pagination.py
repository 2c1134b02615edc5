"""
Pagination defaults and the result page type.

``normalize_page_window`` and ``normalize_limit`` are the only place the
defaults are applied.  The service normalises before delegating and every
repository normalises again on entry, so the page invariants hold whichever
layer receives a raw value first.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field

from news_app.domain.post import Post

DEFAULT_PAGE_SIZE = 9
DEFAULT_RECENT_LIMIT = 5


def normalize_page_window(page: int, page_size: int) -> tuple[int, int]:
    """Clamp *page* to >= 1; replace a non-positive *page_size* with the default."""
    if page < 1:
        page = 1
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def normalize_limit(limit: int) -> int:
    return limit if limit >= 1 else DEFAULT_RECENT_LIMIT


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


@dataclass
class PostPage:
    items: list[Post] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
