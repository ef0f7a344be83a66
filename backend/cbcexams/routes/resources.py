"""
CBC Exams Backend: Resource Route Handlers
============================================

What:  GET /v1/api/resources/ (keyword search) and
       GET /v1/api/resources/parent-directories (directory listing).
How:   Reads raw query-string values, parses pagination leniently and
       delegates to the search/directory services with the shared cache.

`page` and `limit` are declared as plain strings: malformed values fall
back to page 1 / limit 100 instead of producing a 422.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cbcexams.config import settings
from cbcexams.database import get_db_session
from cbcexams.schemas.common import ErrorResponse
from cbcexams.schemas.resource import DirectoryListingResponse, ResourceSearchResponse
from cbcexams.services.directory_service import directory_service
from cbcexams.services.pagination import parse_page
from cbcexams.services.result_cache import ResultCache, get_result_cache
from cbcexams.services.search_service import search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/api/resources", tags=["Resources"])


@router.get(
    "/",
    response_model=ResourceSearchResponse,
    responses={
        200: {"description": "Matching resources", "model": ResourceSearchResponse},
        500: {"description": "Count or fetch failed", "model": ErrorResponse},
    },
    summary="Search crawled resources",
    description=(
        "Keyword search across name, directory, links, path and extracted text. "
        "Up to four terms (q1..q4) are combined; when nothing matches, trailing "
        "terms are dropped one at a time. `parameters_used` reports which terms "
        "shaped the result."
    ),
)
async def get_resources(
    q1: Optional[str] = Query(default=None, description="Most important term (grade9 → grade 9)"),
    q2: Optional[str] = Query(default=None),
    q3: Optional[str] = Query(default=None),
    q4: Optional[str] = Query(default=None, description="Least important term, dropped first"),
    page: Optional[str] = Query(default=None, description="1-based page number"),
    limit: Optional[str] = Query(default=None, description="Rows per page (default 100)"),
    db: AsyncSession = Depends(get_db_session),
    cache: Optional[ResultCache] = Depends(get_result_cache),
) -> ResourceSearchResponse:
    return await search_service.search_resources(
        db=db,
        cache=cache,
        values={"q1": q1, "q2": q2, "q3": q3, "q4": q4},
        page=parse_page(page, limit, default_limit=settings.resource_page_limit),
    )


@router.get(
    "/parent-directories",
    response_model=DirectoryListingResponse,
    responses={
        200: {"description": "Directories and their resources", "model": DirectoryListingResponse},
        500: {"description": "Count or fetch failed", "model": ErrorResponse},
    },
    summary="List resources grouped by directory",
    description=(
        "Pages over distinct parent directories (optionally filtered by `search`) "
        "and returns every resource in each directory of the page."
    ),
)
async def get_parent_directories(
    search: Optional[str] = Query(default=None, description="Substring of the directory path"),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None, description="Directories per page (default 100)"),
    db: AsyncSession = Depends(get_db_session),
    cache: Optional[ResultCache] = Depends(get_result_cache),
) -> DirectoryListingResponse:
    return await directory_service.list_directories(
        db=db,
        cache=cache,
        search=search,
        page=parse_page(page, limit, default_limit=settings.resource_page_limit),
    )
