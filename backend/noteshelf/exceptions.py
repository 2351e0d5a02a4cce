"""
NoteShelf Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each failure class of a request.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers (registered in main.py) turn them into
       `{"error": message}` JSON bodies with the matching status code.
Who:   Raised by NoteStore and NoteService; caught by the global handlers.

Exception Hierarchy:
    NoteShelfError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    │   └── MalformedBodyError       → 400 Bad Request (body is not JSON)
    ├── NotFoundError                → 404 Not Found (update/delete target absent)
    ├── RouteError                   → 404 Not Found (no handler matches)
    └── PersistenceError             → 500 Internal Server Error
        └── StoreInitializationError → fatal at startup
"""

from typing import Any, Dict, Optional


class NoteShelfError(Exception):
    """
    Base exception for all NoteShelf application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteShelfError):
    """
    Raised when client input fails validation.

    When:    Missing or blank title/description, non-integer note id,
             body fields of the wrong type.
    HTTP:    400 Bad Request. Always raised before the store is touched.
    """

    status_code = 400

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


class MalformedBodyError(ValidationError):
    """Raised when the request body cannot be parsed as JSON."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid JSON", context=context)


class NotFoundError(NoteShelfError):
    """
    Raised when an update or delete matched no row.

    The store reports a changed-row count of zero; NoteService converts
    that into this exception so the route stays free of status logic.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class RouteError(NoteShelfError):
    """Raised (or synthesized) when no route matches the method and path."""

    status_code = 404

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Route not found", context=context)


class PersistenceError(NoteShelfError):
    """
    Raised when the storage engine fails a statement.

    The message is always the generic "Failed to <verb> note(s)" text.
    The underlying engine error lives in `context` and is only logged.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Failed to access notes",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreInitializationError(PersistenceError):
    """
    Raised when the backing file or the notes schema cannot be created.

    Fatal: the lifespan handler logs it and re-raises so the server
    aborts startup instead of serving requests without a store.
    """

    def __init__(
        self,
        message: str = "Failed to initialize the note store",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
