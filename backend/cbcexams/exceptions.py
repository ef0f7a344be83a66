"""
CBC Exams Backend: Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the error scenarios the API reports.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    CbcExamsError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    └── DatabaseError     → 500 Internal Server Error

Search and directory failures are terminal for the request: nothing in the
service layer retries a failed count or fetch.
"""

from typing import Any, Dict, Optional


class CbcExamsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CbcExamsError):
    """
    Raised when client input fails a business rule.

    When:    A feedback submission contains only whitespace in a required field.
    HTTP:    400 Bad Request

    Schema-level problems (missing fields, wrong types) are rejected earlier by
    FastAPI with 422; this exception covers the checks Pydantic cannot express.

    Example response:
        {
            "error": "validation_error",
            "message": "Message must not be blank",
            "details": {"field": "message"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(CbcExamsError):
    """
    Raised when a database count, fetch or insert fails.

    HTTP:    500 Internal Server Error

    The message is always a short generic phrase such as
    "Failed to count resources"; the driver error is kept in `context`
    and only ever logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
