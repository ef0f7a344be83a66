"""
CBC Exams Backend: Resource Search Service
============================================

What:  Keyword search over the crawled-resource catalog with progressive
       relaxation, plus response caching for identical requests.
Who:   Called by GET /v1/api/resources/.
When:  On every catalog search; a cache hit skips the database entirely.

Search Flow:
    ┌──────────┐   hit    ┌──────────────┐
    │  Cache   │─────────▶│  Response    │
    └────┬─────┘          └──────────────┘
         │ miss                  ▲
         ▼                       │
    ┌──────────────────────┐     │
    │ COUNT q1∧q2∧q3∧q4    │─ >0 ┤
    │ COUNT q1∧q2∧q3       │─ >0 ┤
    │ COUNT q1∧q2          │─ >0 ┤   each step drops the trailing slot
    │ COUNT q1             │─ >0 ┤
    │ COUNT (unfiltered)   │─────┘   fallback when nothing matched
    └──────────────────────┘
         then one paged SELECT for the chosen predicate

Predicate:
    Each non-empty slot value is lowercased and must appear as a substring
    of at least one of six columns (name, parent_directory,
    google_drive_download_link, relative_path, extracted_content,
    google_cloud_storage_link). Slots are AND-ed together, so every extra
    slot narrows the result and dropping one widens it.

    q1 additionally gets "grade9" → "grade 9" / "form2" → "form 2", matching
    how the crawler stores class levels.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from cbcexams.exceptions import DatabaseError
from cbcexams.models.resource import WebCrawlerResource
from cbcexams.schemas.resource import ResourceItem, ResourceSearchResponse
from cbcexams.services.pagination import Page, build_pagination
from cbcexams.services.result_cache import ResultCache

logger = logging.getLogger(__name__)

# Priority order: the last slot is the first to be dropped
SEARCH_PARAMS: Tuple[str, ...] = ("q1", "q2", "q3", "q4")

CACHE_NAMESPACE = "resources"

SEARCHABLE_COLUMNS = (
    WebCrawlerResource.name,
    WebCrawlerResource.parent_directory,
    WebCrawlerResource.google_drive_download_link,
    WebCrawlerResource.relative_path,
    WebCrawlerResource.extracted_content,
    WebCrawlerResource.google_cloud_storage_link,
)

_GRADE_FORM_PATTERN = re.compile(r"(grade|form)(\d)", re.IGNORECASE)


def normalize_grade_form(value: str) -> str:
    """
    Insert a space between a grade/form keyword and a directly attached digit.

    >>> normalize_grade_form("grade9 maths")
    'grade 9 maths'
    >>> normalize_grade_form("form 2")
    'form 2'
    """
    return _GRADE_FORM_PATTERN.sub(r"\1 \2", value)


def match_any_column(value: str) -> ColumnElement:
    """Case-insensitive substring match of `value` against every searchable column."""
    return or_(*(column.icontains(value, autoescape=True) for column in SEARCHABLE_COLUMNS))


@dataclass
class SearchOutcome:
    """Result of one relaxed search, before it is shaped into a response."""
    items: List[ResourceItem]
    total_records: int
    parameters_used: List[str] = field(default_factory=list)


class SearchService:
    """
    Catalog search with progressive relaxation.

    Responsibilities:
        - prepare_terms(): lowercase/normalize the q1..q4 slots
        - find(): relaxation loop + paged fetch (no caching)
        - search_resources(): cache lookup → find() → cache store

    Stateless: the session and cache are passed per call.
    """

    def prepare_terms(self, values: Mapping[str, Optional[str]]) -> List[Tuple[str, str]]:
        """
        Ordered (slot, search term) pairs for every slot; empty slots map to "".
        """
        terms = []
        for name in SEARCH_PARAMS:
            value = (values.get(name) or "").strip().lower()
            if name == "q1" and value:
                value = normalize_grade_form(value)
            terms.append((name, value))
        return terms

    def build_conditions(
        self, terms: Sequence[Tuple[str, str]]
    ) -> Tuple[List[str], List[ColumnElement]]:
        """Returns the names of the non-empty slots and one predicate per slot."""
        names = [name for name, value in terms if value]
        conditions = [match_any_column(value) for _, value in terms if value]
        return names, conditions

    async def find(
        self,
        db: AsyncSession,
        values: Mapping[str, Optional[str]],
        page: Page,
    ) -> SearchOutcome:
        """
        Run the relaxation loop and fetch the requested page.

        Args:
            db: Async database session
            values: Raw query-string values keyed by slot name (q1..q4)
            page: Parsed pagination

        Returns:
            SearchOutcome for the most specific slot prefix with at least one
            match, or for the unfiltered catalog when none matched

        Raises:
            DatabaseError: A count or fetch failed
        """
        terms = self.prepare_terms(values)

        chosen: List[ColumnElement] = []
        used: List[str] = []
        total: Optional[int] = None
        attempted: Optional[List[str]] = None

        for size in range(len(terms), 0, -1):
            names, conditions = self.build_conditions(terms[:size])
            if not conditions:
                # Remaining prefix is all empty; serve the whole catalog
                break
            if names == attempted:
                # Dropped slot was empty; the predicate is unchanged
                continue
            attempted = names

            count = await self._count(db, conditions)
            if count > 0:
                chosen, used, total = conditions, names, count
                break
            logger.debug("No resources match %s; relaxing", names)

        if total is None:
            total = await self._count(db, [])

        items = await self._fetch(db, chosen, page)
        return SearchOutcome(items=items, total_records=total, parameters_used=used)

    async def search_resources(
        self,
        db: AsyncSession,
        cache: Optional[ResultCache],
        values: Mapping[str, Optional[str]],
        page: Page,
    ) -> ResourceSearchResponse:
        """
        Cached catalog search.

        The cache key uses the raw slot values (all four, in order) and the
        parsed page, so identical requests share one entry.
        """
        key = ResultCache.make_key(
            CACHE_NAMESPACE,
            [(name, values.get(name) or "") for name in SEARCH_PARAMS],
            page,
        )

        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                logger.debug("Result cache hit: %s", key)
                return cached

        outcome = await self.find(db, values, page)
        response = ResourceSearchResponse(
            data=outcome.items,
            pagination=build_pagination(outcome.total_records, page),
            parameters_used=outcome.parameters_used,
        )

        if cache is not None:
            cache.set(key, response)
        return response

    # ── Queries ───────────────────────────────────────────────────────────

    async def _count(self, db: AsyncSession, conditions: List[ColumnElement]) -> int:
        stmt = select(func.count()).select_from(WebCrawlerResource)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        try:
            result = await db.execute(stmt)
        except Exception as e:
            logger.error("Resource count failed: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to count resources",
                context={"error_type": type(e).__name__},
            )
        return result.scalar() or 0

    async def _fetch(
        self, db: AsyncSession, conditions: List[ColumnElement], page: Page
    ) -> List[ResourceItem]:
        stmt = select(
            WebCrawlerResource.id,
            WebCrawlerResource.name,
            WebCrawlerResource.django_relative_path,
            WebCrawlerResource.google_cloud_storage_link,
            WebCrawlerResource.created_at,
        )
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = (
            stmt.order_by(WebCrawlerResource.created_at.desc(), WebCrawlerResource.id)
            .offset(page.offset)
            .limit(page.limit)
        )
        try:
            result = await db.execute(stmt)
            rows = result.all()
        except Exception as e:
            logger.error("Resource fetch failed: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch resources",
                context={"error_type": type(e).__name__},
            )

        return [
            ResourceItem(
                id=row.id,
                name=row.name,
                django_relative_path=row.django_relative_path,
                google_cloud_storage_link=row.google_cloud_storage_link,
                created_at=row.created_at,
            )
            for row in rows
        ]


search_service = SearchService()
