"""Pagination — page/limit normalisation and the pagination envelope.

Invariants:
    - limit is clamped into [1, max_limit]; page is clamped into [1, MAX_PAGE]
    - offset = (page - 1) * limit
    - totalPages is ceil(total / limit); hasNext/hasPrev derived from it

Design Decisions:
    - Clamp instead of reject: list endpoints never 400 on an out-of-range limit
"""

import math
from dataclasses import dataclass

ARTICLES_DEFAULT_LIMIT: int = 10
ARTICLES_MAX_LIMIT: int = 50
COMMENTS_DEFAULT_LIMIT: int = 20
COMMENTS_MAX_LIMIT: int = 100
# keeps (page - 1) * limit inside a 64-bit OFFSET for any max_limit in use
MAX_PAGE: int = 2**31 - 1


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def resolve_page(
    page: int | None, limit: int | None, default_limit: int, max_limit: int,
) -> PageRequest:
    """Normalise raw query values into a PageRequest."""
    page = min(page, MAX_PAGE) if page and page > 0 else 1
    limit = limit if limit else default_limit
    return PageRequest(page=page, limit=min(max(limit, 1), max_limit))


def build_pagination(request: PageRequest, total: int) -> dict:
    total_pages = math.ceil(total / request.limit) if total else 0
    return {
        "page": request.page,
        "limit": request.limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": request.page < total_pages,
        "hasPrev": request.page > 1,
    }
