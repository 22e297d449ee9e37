"""Pagination — pure clamping of page/limit query values.

Invariants:
    - limit always lands in [MIN_LIMIT, MAX_LIMIT]
    - page always >= 1
    - offset == (page - 1) * limit
"""

from dataclasses import dataclass

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageWindow:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def clamp_page(page: int | None) -> int:
    if page is None:
        return DEFAULT_PAGE
    return max(DEFAULT_PAGE, page)


def clamp_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    return min(MAX_LIMIT, max(MIN_LIMIT, limit))


def page_window(page: int | None, limit: int | None) -> PageWindow:
    """Clamp raw query values into a usable window."""
    return PageWindow(page=clamp_page(page), limit=clamp_limit(limit))
