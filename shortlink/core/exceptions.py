"""
Custom Exceptions

This module defines the exceptions raised by the registry, its persistence
store and the short code generator.

Unknown short codes are not exceptional: lookups return None and deletes
return False, and the HTTP layer turns those into 404 responses.
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class StoreError(URLShortenerException):
    """Base class for persistence store failures."""

    def __init__(self, path: str, message: str, original_error: Optional[Exception] = None):
        self.path = path
        self.original_error = original_error
        super().__init__(f"{message}: {path}")


class StoreUnreadableError(StoreError):
    """
    Raised when the store file exists but cannot be read or parsed.

    Only the strict read path raises this; loading at startup degrades
    to an empty registry instead.
    """

    def __init__(self, path: str, original_error: Optional[Exception] = None):
        super().__init__(path, "Store file is unreadable", original_error)


class StoreWriteError(StoreError):
    """Raised when the registry document could not be written to disk."""

    def __init__(self, path: str, original_error: Optional[Exception] = None):
        super().__init__(path, "Failed to write store file", original_error)


class GenerationExhaustedError(URLShortenerException):
    """Raised when every generated short code candidate is already taken."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No free short code found after {attempts} attempts")
