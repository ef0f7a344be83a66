"""
CBC Exams Backend: Resource Response Schemas
==============================================

What:  API contract for the resource search and directory listing endpoints.
How:   Responses are frozen so the object held by the result cache can be
       handed to any number of requests unchanged. A cache hit and a fresh
       computation return the same model type, so clients cannot tell them apart.

Neither schema exposes `extracted_content`: it is searched, never returned.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from cbcexams.schemas.common import PaginationMeta


class ResourceItem(BaseModel):
    """One row of GET /v1/api/resources/."""
    id: uuid.UUID = Field(description="Resource identifier")
    name: Optional[str] = Field(default=None, description="Display name of the document")
    django_relative_path: Optional[str] = Field(default=None, description="Path on the legacy site")
    google_cloud_storage_link: Optional[str] = Field(default=None, description="Public download URL")
    created_at: datetime = Field(description="When the crawler stored the document")

    model_config = {"frozen": True}


class ResourceSearchResponse(BaseModel):
    """
    What:  Paginated search result.

    parameters_used lists the query slots (q1..q4) that shaped the result
    after relaxation; it is empty when the unfiltered catalog was served.
    """
    data: List[ResourceItem] = Field(description="Matching resources for the requested page")
    pagination: PaginationMeta
    parameters_used: List[str] = Field(
        default_factory=list,
        description="Query parameters actually applied, most specific first",
    )

    model_config = {"frozen": True}


class DirectoryRecord(BaseModel):
    """A resource listed under its parent directory."""
    id: uuid.UUID
    parent_directory: Optional[str] = Field(default=None, description="Untrimmed directory as stored")
    name: Optional[str] = None
    google_cloud_storage_link: Optional[str] = None

    model_config = {"frozen": True}


class DirectoryListingResponse(BaseModel):
    """
    What:  Resources grouped by trimmed parent directory.

    Pagination counts distinct directories, not resources, so one page may
    hold far more than `limit` records.
    """
    data: Dict[str, List[DirectoryRecord]] = Field(
        description="Trimmed directory path → member resources"
    )
    pagination: PaginationMeta

    model_config = {"frozen": True}
