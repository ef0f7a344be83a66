"""
CBC Exams Backend: Directory Listing Service
==============================================

What:  Groups crawled resources by parent directory, paginating over the
       distinct directories rather than over individual resources.
Who:   Called by GET /v1/api/resources/parent-directories.

Steps:
    1. SELECT DISTINCT parent_directory (optionally filtered), COUNT it, and
       take one page of it in ascending order
    2. SELECT id, parent_directory, name, google_cloud_storage_link for every
       resource whose directory is in that page
    3. Strip the crawler's filesystem prefix and group records by the trimmed
       directory. A directory that trims to "" is dropped with its members.

Search input has spaces replaced by "-" before matching, since the crawler
writes directory names hyphenated ("grade 9 notes" → "grade-9-notes").
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cbcexams.config import settings
from cbcexams.exceptions import DatabaseError
from cbcexams.models.resource import WebCrawlerResource
from cbcexams.schemas.resource import DirectoryListingResponse, DirectoryRecord
from cbcexams.services.pagination import Page, build_pagination
from cbcexams.services.result_cache import ResultCache

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "unique_directories"


def normalize_directory_search(search: Optional[str]) -> str:
    """
    >>> normalize_directory_search(" Grade 9 Notes ")
    'grade-9-notes'
    """
    return (search or "").strip().replace(" ", "-").lower()


def trim_directory(directory: Optional[str], prefix: str) -> str:
    return (directory or "").removeprefix(prefix)


def group_by_directory(
    records: Iterable[DirectoryRecord], prefix: str
) -> Dict[str, List[DirectoryRecord]]:
    """Map trimmed directory → records, skipping directories that trim to ""."""
    grouped: Dict[str, List[DirectoryRecord]] = {}
    for record in records:
        key = trim_directory(record.parent_directory, prefix)
        if key:
            grouped.setdefault(key, []).append(record)
    return grouped


class DirectoryService:
    """Distinct-directory listing with per-directory member records."""

    def __init__(self, prefix: str):
        self.prefix = prefix

    async def list_directories(
        self,
        db: AsyncSession,
        cache: Optional[ResultCache],
        search: Optional[str],
        page: Page,
    ) -> DirectoryListingResponse:
        """
        One page of directories and their resources.

        Args:
            db: Async database session
            cache: Shared result cache, or None to always compute
            search: Optional case-insensitive substring of parent_directory
            page: Pagination over distinct directories

        Raises:
            DatabaseError: Count or fetch failed
        """
        term = normalize_directory_search(search)
        key = ResultCache.make_key(CACHE_NAMESPACE, [("search", term)], page)

        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                logger.debug("Result cache hit: %s", key)
                return cached

        # ── Step 1: distinct directories ──────────────────────────────────
        directories_stmt = select(WebCrawlerResource.parent_directory).distinct()
        if term:
            directories_stmt = directories_stmt.where(
                WebCrawlerResource.parent_directory.icontains(term, autoescape=True)
            )

        try:
            count_result = await db.execute(
                select(func.count()).select_from(directories_stmt.subquery())
            )
            total_records = count_result.scalar() or 0
        except Exception as e:
            logger.error("Directory count failed: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to count directories",
                context={"error_type": type(e).__name__},
            )

        try:
            page_result = await db.execute(
                directories_stmt.order_by(WebCrawlerResource.parent_directory)
                .offset(page.offset)
                .limit(page.limit)
            )
            directories = [d for d in page_result.scalars().all() if d is not None]
        except Exception as e:
            logger.error("Directory fetch failed: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch directories",
                context={"error_type": type(e).__name__},
            )

        # ── Step 2: member records ────────────────────────────────────────
        records: List[DirectoryRecord] = []
        if directories:
            try:
                records_result = await db.execute(
                    select(
                        WebCrawlerResource.id,
                        WebCrawlerResource.parent_directory,
                        WebCrawlerResource.name,
                        WebCrawlerResource.google_cloud_storage_link,
                    )
                    .where(WebCrawlerResource.parent_directory.in_(directories))
                    .order_by(
                        WebCrawlerResource.parent_directory,
                        WebCrawlerResource.name,
                        WebCrawlerResource.id,
                    )
                )
                records = [
                    DirectoryRecord(
                        id=row.id,
                        parent_directory=row.parent_directory,
                        name=row.name,
                        google_cloud_storage_link=row.google_cloud_storage_link,
                    )
                    for row in records_result.all()
                ]
            except Exception as e:
                logger.error("Directory records fetch failed: %s", str(e), exc_info=True)
                raise DatabaseError(
                    message="Failed to fetch records",
                    context={"error_type": type(e).__name__},
                )

        # ── Step 3: trim and group ────────────────────────────────────────
        response = DirectoryListingResponse(
            data=group_by_directory(records, self.prefix),
            pagination=build_pagination(total_records, page),
        )

        if cache is not None:
            cache.set(key, response)
        return response


directory_service = DirectoryService(prefix=settings.directory_prefix)
