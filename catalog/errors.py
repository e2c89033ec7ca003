"""
Error taxonomy for catalog operations.

Each error carries the HTTP status the API layer renders it with.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(CatalogError):
    """A required reference is missing or malformed."""

    status_code = 400


class NotFoundError(CatalogError):
    """A resource or embedded sub-resource does not exist."""

    status_code = 404


class StoreError(CatalogError):
    """The document store rejected or failed an operation."""

    status_code = 500

    def __init__(self, operation: str, error: Exception):
        super().__init__(f"Store operation failed: {operation}", detail=str(error))
        self.operation = operation
        self.error = error
