"""
WordLog Backend — Custom Exception Hierarchy
=============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions let the HTTP layer pick a status code per failure
       without the store or connection code knowing anything about HTTP.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses.
Who:   Raised by the connection manager and the record store.

Exception Hierarchy:
    WordLogError (base)
    ├── ConfigurationError       → 500 (MONGODB_URI missing or invalid)
    ├── DatabaseConnectionError  → 503 (MongoDB unreachable)
    ├── ValidationError          → 400 (client can fix the input)
    └── DatabaseError            → 500 (driver failure mid-operation)

None of these are retried by the application.
"""

from typing import Any, Dict, List, Optional


class WordLogError(Exception):
    """
    Base exception for all WordLog application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only returned for validation errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(WordLogError):
    """
    Raised when the MongoDB connection URI is missing or malformed.

    Always raised before any network call is attempted.
    """

    def __init__(
        self,
        message: str = "MONGODB_URI is not configured",
        setting: Optional[str] = "MONGODB_URI",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if setting:
            ctx["setting"] = setting
        super().__init__(message=message, context=ctx)
        self.setting = setting


class DatabaseConnectionError(WordLogError):
    """
    Raised when MongoDB cannot be reached.

    What:    The connect attempt (or the connection under a running
             operation) failed at the network level.
    HTTP:    503 Service Unavailable

    The driver exception is chained as __cause__.
    """

    def __init__(
        self,
        message: str = "The database is unreachable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(WordLogError):
    """
    Raised when a candidate record violates the WordObservation rules.

    Attributes:
        field:   The first field that failed validation
        errors:  Every violation as {"field", "rule", "message"} dicts

    Example response:
        {
            "error": "validation_error",
            "message": "interviewee: Path `interviewee` is required.",
            "details": {
                "field": "interviewee",
                "errors": [{"field": "interviewee", "rule": "required", "message": "..."}]
            }
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        if errors:
            ctx["errors"] = errors
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = errors or []

    @property
    def fields(self) -> List[str]:
        """Names of every field with at least one violation, in rule order."""
        seen: List[str] = []
        for error in self.errors:
            if error["field"] not in seen:
                seen.append(error["field"])
        return seen


class DatabaseError(WordLogError):
    """
    Raised when a MongoDB operation fails unexpectedly.

    Security Note:
        The message returned to the client is always generic. Driver details
        are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
