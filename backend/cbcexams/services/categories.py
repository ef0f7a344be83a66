"""
CBC Exams Backend: Catalog Taxonomy
=====================================

What:  The fixed vocabulary the crawled catalog is organised by: class
       levels, the education bands they belong to, resource types and the
       subjects taught in each band.
Who:   Served by GET /v1/api/categories/. The frontend builds its search
       filters from it, so every "Grade N" / "Form N" label here is a term
       that q1 normalization produces from "gradeN" / "formN".

The taxonomy is static and changes only with a deploy.
"""

from typing import Dict, Tuple

from cbcexams.schemas.category import CategoriesResponse

LEVELS: Tuple[str, ...] = (
    "Grade 9", "Grade 8", "Grade 7", "Grade 6", "Grade 5", "Grade 4",
    "Grade 3", "Grade 2", "Grade 1",
    "Playgroup", "PP1", "PP2",
    "Form 1", "Form 2", "Form 3", "Form 4",
)

EDUCATION_LEVELS: Dict[str, Tuple[str, ...]] = {
    "Pre-Primary": ("Playgroup", "PP1", "PP2"),
    "Lower Primary": ("Grade 1", "Grade 2", "Grade 3"),
    "Upper Primary": ("Grade 4", "Grade 5", "Grade 6"),
    "Junior School": ("Grade 7", "Grade 8", "Grade 9"),
    "Senior School": ("Grade 10", "Grade 11", "Grade 12"),
    "High School": ("Form 1", "Form 2", "Form 3", "Form 4"),
}

RESOURCE_TYPES_BY_LEVEL: Dict[str, Tuple[str, ...]] = {
    "All Education Levels": (
        "Opener Exam", "Mid Term Exam", "End Term Exam", "Schemes of Work",
        "Lesson Plan", "Notes", "Assignment", "Topic-tests", "Lesson Plans",
        "Syllabus", "Study Guide", "Marking Scheme", "Design-Material",
    ),
    "High School": ("KCSE", "Mock"),
    "Upper Primary": ("KPSEA",),
    "Teacher": (
        "Lesson Plans", "Syllabus", "Schemes of Work", "Study Guide",
        "Marking Scheme", "Design-Material",
    ),
    "Misc": ("Assessment Book", "Record of Work", "CBC Assessment Rubric"),
}

RESOURCE_TYPE_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "Exams and Past Papers": (
        "Opener Exam", "Mid Term Exam", "End Term Exam", "KCSE", "Mock",
        "KPSEA", "Topic-tests",
    ),
    "Teacher's Resources": (
        "Schemes of Work", "Lesson Plan", "Syllabus", "Study Guide",
        "Marking Scheme", "Design-Material", "Record of Work",
        "CBC Assessment Rubric",
    ),
    # Study Guide and Design-Material belong to two groups each
    "Notes": ("Notes", "Assignment", "Study Guide"),
    "Other": ("Assessment Book", "Design-Material"),
}

SUBJECTS: Dict[str, Tuple[str, ...]] = {
    "High School": (
        "Mathematics", "English", "Kiswahili", "Biology", "Chemistry", "Physics",
        "History & Government", "Geography", "Christian Religious Education",
        "Islamic Religious Education", "Hindu Religious Education",
        "Business Studies", "Agriculture", "Computer Studies", "Home Science",
        "Art & Design", "Music", "French", "German", "Arabic",
        "Aviation Technology", "Woodwork", "Metalwork",
    ),
    "Pre-Primary": (
        "Language Activities", "English", "Kiswahili", "Mathematical Activities",
        "Environmental Activities", "Psychomotor & Creative Activities", "Art",
        "Music", "Movement", "Christian Religious Education",
        "Islamic Religious Education", "Hindu Religious Education",
        "Pastoral Instruction",
    ),
    "Lower Primary": (
        "English", "Kiswahili", "Mathematics", "Environmental Activities",
        "Hygiene & Nutrition", "Christian Religious Education",
        "Islamic Religious Education", "Hindu Religious Education",
        "Movement & Creative Arts", "Music", "Art", "Physical Education",
    ),
    "Upper-Primary": (
        "English", "Kiswahili", "Mathematics", "Science & Technology",
        "Social Studies", "History", "Geography", "Citizenship",
        "Christian Religious Education", "Islamic Religious Education",
        "Hindu Religious Education",
    ),
    "Junior-Secondary": (
        "English", "Kiswahili", "Mathematics", "Integrated Science",
        "Health Education", "Pre-Technical Studies", "Social Studies", "History",
        "Geography", "Civics", "Business Studies", "Christian Religious Education",
        "Islamic Religious Education", "Hindu Religious Education", "Agriculture",
        "Life Skills", "Computer Science", "Performing Arts", "Music", "Drama",
        "Visual Arts", "Art & Design", "French", "German", "Arabic",
        "Kenyan Sign Language",
    ),
}


def _as_lists(mapping: Dict[str, Tuple[str, ...]]) -> Dict[str, list]:
    return {key: list(values) for key, values in mapping.items()}


def get_categories() -> CategoriesResponse:
    """Taxonomy payload; a fresh model each call so callers cannot mutate the constants."""
    return CategoriesResponse(
        levels=list(LEVELS),
        education_levels=_as_lists(EDUCATION_LEVELS),
        resource_types_by_level=_as_lists(RESOURCE_TYPES_BY_LEVEL),
        resource_type_categories=_as_lists(RESOURCE_TYPE_CATEGORIES),
        subjects=_as_lists(SUBJECTS),
    )
