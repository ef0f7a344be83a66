"""
CBC Exams Backend: Offset Pagination
======================================

What:  Turns request-supplied `page`/`limit` strings into an offset/limit
       pair and builds the pagination block returned with every listing.
Who:   Search, directory and feedback services.

Rules:
    - page and limit arrive as raw query-string values
    - anything unparseable or non-positive falls back to the default
      (page 1; limit 10, or 100 for resource endpoints); bad input is never
      rejected
    - offset      = (page - 1) * limit
    - total_pages = ceil(total_records / limit)
    - next_page   = page + 1, or 0 when page + 1 > total_pages
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from cbcexams.schemas.common import PaginationMeta

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# OFFSET/LIMIT are bound as signed 64-bit integers by every supported driver
MAX_SQL_INT = 2**63 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

PageValue = Optional[Union[str, int]]


@dataclass(frozen=True)
class Page:
    """A validated page request."""
    number: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.number - 1) * self.limit


def _positive_int(value: PageValue, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    text = str(value).strip()
    if not _INTEGER_PATTERN.fullmatch(text):
        return default
    parsed = int(text)
    return parsed if 0 < parsed <= MAX_SQL_INT else default


def parse_page(
    page: PageValue = None,
    limit: PageValue = None,
    default_limit: int = DEFAULT_LIMIT,
) -> Page:
    """
    Parse raw pagination input, silently defaulting bad values.

    Only plain ASCII integers are accepted ("1_0" and "４" are not). Values
    above the 64-bit range, or a page whose offset would leave it, fall back
    to the defaults.

    >>> parse_page("3", "25")
    Page(number=3, limit=25)
    >>> parse_page("abc", "-5", default_limit=100)
    Page(number=1, limit=100)
    >>> parse_page("99999999999999999999", "100")
    Page(number=1, limit=100)
    """
    parsed = Page(
        number=_positive_int(page, DEFAULT_PAGE),
        limit=_positive_int(limit, default_limit),
    )
    if parsed.offset > MAX_SQL_INT:
        return Page(number=DEFAULT_PAGE, limit=parsed.limit)
    return parsed


def total_pages(total_records: int, limit: int) -> int:
    """Ceiling division; 0 when there are no records."""
    return (total_records + limit - 1) // limit


def next_page(current: int, pages: int) -> int:
    following = current + 1
    return following if following <= pages else 0


def build_pagination(total_records: int, page: Page) -> PaginationMeta:
    """Pagination block for a listing of `total_records` rows served at `page`."""
    pages = total_pages(total_records, page.limit)
    return PaginationMeta(
        total_records=total_records,
        total_pages=pages,
        current_page=page.number,
        next_page=next_page(page.number, pages),
        limit=page.limit,
    )
