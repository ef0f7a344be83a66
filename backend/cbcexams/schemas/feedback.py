"""
CBC Exams Backend: Feedback Schemas
=====================================

What:  Request/response models for the feedback endpoints.
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator

from cbcexams.schemas.common import PaginationMeta


class FeedbackCreate(BaseModel):
    """Body of POST /v1/api/feedback."""
    full_name: str = Field(max_length=255, description="Sender's name")
    email: str = Field(max_length=255, description="Sender's email address")
    message: str = Field(max_length=10_000, description="Feedback text")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Loose shape check; delivery is never attempted."""
        v = v.strip()
        if v and ("@" not in v or v.startswith("@") or v.endswith("@")):
            raise ValueError("Invalid email address")
        return v


class FeedbackItem(BaseModel):
    id: uuid.UUID
    full_name: str
    email: str
    message: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FeedbackSubmitResponse(BaseModel):
    """Returned by POST /v1/api/feedback with HTTP 201."""
    message: str = Field(default="Feedback submitted successfully")
    data: FeedbackItem


class FeedbackListResponse(BaseModel):
    """Returned by GET /v1/api/feedback."""
    data: List[FeedbackItem]
    pagination: PaginationMeta
