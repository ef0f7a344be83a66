"""
CBC Exams Backend: Application Package Initializer
===================================================

What: Marks the `cbcexams` directory as a Python package.
Who:  Imported by uvicorn (`cbcexams.main:app`), Alembic and pytest.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← query-string parsing, status codes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← search, relaxation, caching, paging
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Services receive their collaborators (database session, result cache)
    per call, so each can be exercised without the HTTP layer.
"""

__version__ = "1.0.0"
