"""
CBC Exams Backend: Feedback Route Handlers
============================================

What:  POST /v1/api/feedback (submit) and GET /v1/api/feedback (list).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from cbcexams.config import settings
from cbcexams.database import get_db_session
from cbcexams.schemas.common import ErrorResponse
from cbcexams.schemas.feedback import (
    FeedbackCreate,
    FeedbackListResponse,
    FeedbackSubmitResponse,
)
from cbcexams.services.feedback_service import feedback_service
from cbcexams.services.pagination import parse_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/api/feedback", tags=["Feedback"])


@router.post(
    "",
    status_code=201,
    response_model=FeedbackSubmitResponse,
    responses={
        400: {"description": "Blank field", "model": ErrorResponse},
        500: {"description": "Insert failed", "model": ErrorResponse},
    },
    summary="Submit feedback",
)
async def submit_feedback(
    payload: FeedbackCreate,
    db: AsyncSession = Depends(get_db_session),
) -> FeedbackSubmitResponse:
    return await feedback_service.submit_feedback(db=db, payload=payload)


@router.get(
    "",
    response_model=FeedbackListResponse,
    responses={500: {"description": "Listing failed", "model": ErrorResponse}},
    summary="List feedback, newest first",
)
async def list_feedback(
    response: Response,
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None, description="Rows per page (default 10)"),
    db: AsyncSession = Depends(get_db_session),
) -> FeedbackListResponse:
    result = await feedback_service.list_feedback(
        db=db,
        page=parse_page(page, limit, default_limit=settings.default_page_limit),
    )
    response.headers["X-Total-Count"] = str(result.pagination.total_records)
    return result
