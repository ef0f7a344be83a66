"""
CBC Exams Backend: Shared Response Schemas
============================================

What:  Pydantic models reused by every listing endpoint plus the error and
       health payloads.
Who:   Pagination helper, route handlers, global exception handlers.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    """
    What:  Page bookkeeping attached to every paginated response.

    next_page is 0 when the current page is the last one (or beyond it);
    total_pages is 0 for an empty result.
    """
    total_records: int = Field(description="Rows (or distinct directories) matching the request")
    total_pages: int = Field(description="ceil(total_records / limit)")
    current_page: int = Field(description="1-based page number that was served")
    next_page: int = Field(description="Next page number, or 0 when there is none")
    limit: int = Field(description="Page size that was applied")

    model_config = {"frozen": True}


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "server_error",
            "message": "Failed to count resources",
            "request_id": "5f2b9c1e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check payload returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    cache_entries: int = Field(description="Entries currently held by the result cache")
    uptime_seconds: float = Field(description="Seconds since service started")
