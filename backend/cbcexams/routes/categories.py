"""
CBC Exams Backend: Catalog Taxonomy Route
===========================================

What:  GET /v1/api/categories/ returns the static level/subject vocabulary.
"""

from fastapi import APIRouter

from cbcexams.schemas.category import CategoriesResponse
from cbcexams.services.categories import get_categories

router = APIRouter(prefix="/v1/api/categories", tags=["Categories"])


@router.get(
    "/",
    response_model=CategoriesResponse,
    summary="Catalog taxonomy",
    description="Levels, education bands, resource types and subjects used to tag resources.",
)
async def list_categories() -> CategoriesResponse:
    return get_categories()
