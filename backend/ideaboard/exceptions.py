"""
IdeaBoard Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the failure cases of the idea board.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses.
Who:   Raised by the store and services; caught by global handlers.

Exception Hierarchy:
    IdeaBoardError (base)
    ├── ValidationError     → 500 (required input missing; existing API contract)
    ├── NotFoundError       → 404 Not Found
    ├── StoreError          → 500 (ideas.json could not be written)
    └── FileStorageError    → 500 (attachment blob could not be written)

Read failures never surface as exceptions: the store treats a missing or
corrupt ideas.json as an empty collection.
"""

from typing import Any, Dict, Optional


class IdeaBoardError(Exception):
    """
    Base exception for all IdeaBoard application errors.

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


class ValidationError(IdeaBoardError):
    """
    Raised when required client input is absent or blank.

    When:    Idea without a title, note without text, oversized upload,
             malformed request body.
    HTTP:    500 with error code "validation_error".
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


class NotFoundError(IdeaBoardError):
    """
    Raised when a requested resource does not exist.

    When:    Vote or note on an unknown idea id; download of a missing upload.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class StoreError(IdeaBoardError):
    """
    Raised when the idea collection cannot be persisted.

    What:    Writing or renaming ideas.json failed (disk full, permissions).
    HTTP:    500 Internal Server Error

    The previous ideas.json is left in place; the mutation that triggered
    the save is discarded.
    """

    def __init__(
        self,
        message: str = "Failed to save ideas. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(IdeaBoardError):
    """
    Raised when an uploaded attachment cannot be written to the uploads directory.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
