"""
CBC Exams Backend: Feedback Service
=====================================

What:  Stores contact-form feedback and lists it for administrators.
Who:   Called by POST/GET /v1/api/feedback.

Listing uses the generic pagination defaults (page 1, limit 10).
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cbcexams.exceptions import DatabaseError, ValidationError
from cbcexams.models.feedback import Feedback
from cbcexams.schemas.feedback import (
    FeedbackCreate,
    FeedbackItem,
    FeedbackListResponse,
    FeedbackSubmitResponse,
)
from cbcexams.services.pagination import Page, build_pagination

logger = logging.getLogger(__name__)


class FeedbackService:

    async def submit_feedback(
        self, db: AsyncSession, payload: FeedbackCreate
    ) -> FeedbackSubmitResponse:
        """
        Persist one feedback message.

        Raises:
            ValidationError: A required field is blank after trimming (→ 400)
            DatabaseError: Insert failed (→ 500)
        """
        fields = {
            "full_name": payload.full_name.strip(),
            "email": payload.email.strip(),
            "message": payload.message.strip(),
        }
        for name, value in fields.items():
            if not value:
                raise ValidationError(
                    message=f"{name.replace('_', ' ').capitalize()} must not be blank",
                    field=name,
                )

        feedback = Feedback(**fields)
        try:
            db.add(feedback)
            await db.flush()
        except Exception as e:
            logger.error("Feedback insert failed: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to submit feedback",
                context={"error_type": type(e).__name__},
            )

        logger.info("Feedback %s received", feedback.id)
        return FeedbackSubmitResponse(data=FeedbackItem.model_validate(feedback))

    async def list_feedback(self, db: AsyncSession, page: Page) -> FeedbackListResponse:
        """Newest feedback first, one page at a time."""
        try:
            count_result = await db.execute(select(func.count()).select_from(Feedback))
            total_records = count_result.scalar() or 0

            result = await db.execute(
                select(Feedback)
                .order_by(Feedback.created_at.desc(), Feedback.id)
                .offset(page.offset)
                .limit(page.limit)
            )
            rows = list(result.scalars().all())
        except Exception as e:
            logger.error("Feedback listing failed: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch feedback",
                context={"error_type": type(e).__name__},
            )

        return FeedbackListResponse(
            data=[FeedbackItem.model_validate(row) for row in rows],
            pagination=build_pagination(total_records, page),
        )


feedback_service = FeedbackService()
