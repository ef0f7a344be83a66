"""
CBC Exams Backend: Catalog Taxonomy Schema
============================================

What:  Response model for GET /v1/api/categories/.

The wire keys contain spaces ("education levels"), which existing frontend
clients read, so each field carries a serialization alias.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class CategoriesResponse(BaseModel):
    levels: List[str] = Field(description="Class levels, Grade 9 down to Form 4")
    education_levels: Dict[str, List[str]] = Field(
        serialization_alias="education levels",
        description="Education band → class levels",
    )
    resource_types_by_level: Dict[str, List[str]] = Field(
        serialization_alias="resource types education level",
        description="Education band or audience → resource types",
    )
    resource_type_categories: Dict[str, List[str]] = Field(
        serialization_alias="resource types categories",
        description="Resource-type group → resource types",
    )
    subjects: Dict[str, List[str]] = Field(description="Education band → subjects")
