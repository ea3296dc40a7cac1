"""
Custom Exceptions for the Classifieds Marketplace

Hierarchical exception classes for proper error handling across layers.
Each class maps to one HTTP status in main.py.
"""

from typing import Optional, Dict, Any


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ValidationError(MarketplaceError):
    """Raised when input validation fails."""
    pass


class ForbiddenError(MarketplaceError):
    """Raised when the caller lacks the role or ownership for an action."""

    def __init__(
        self,
        message: str,
        actor_id: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if actor_id:
            details["actor_id"] = actor_id
        super().__init__(message, details, original_error)


class InvalidStateError(MarketplaceError):
    """Raised when a status transition is attempted from the wrong state."""

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if current_status:
            details["current_status"] = current_status
        super().__init__(message, details, original_error)


class DatabaseError(MarketplaceError):
    """Raised when database operations fail."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table
        super().__init__(message, details, original_error)


class NotFoundError(DatabaseError):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(DatabaseError):
    """Raised when a write violates a uniqueness invariant."""
    pass


class StorageError(MarketplaceError):
    """Raised when the proof object store rejects or fails an upload."""

    def __init__(
        self,
        message: str,
        bucket: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if bucket:
            details["bucket"] = bucket
        super().__init__(message, details, original_error)


class ConfigurationError(MarketplaceError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(message, details, original_error)
