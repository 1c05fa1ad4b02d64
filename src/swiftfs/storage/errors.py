"""
Object storage error classes.

Provides the error taxonomy shared by the stream session and the storage
collaborators. HTTP status codes and transport exceptions are mapped onto
these classes so callers see one consistent hierarchy regardless of the
backend in use.
"""
from __future__ import annotations


class SwiftError(Exception):
    """Base class for all object storage errors."""
    pass


class MissingResourceIdentifier(SwiftError, ValueError):
    """
    Locator lacks a container name or an object name.

    Raised before any remote call is made.
    """
    pass


class InvalidResourceIdentifier(SwiftError, ValueError):
    """
    Locator has percent escapes that do not decode to UTF-8.

    Raised before any remote call is made.
    """
    pass


class AuthenticationError(SwiftError):
    """
    Credentials are insufficient or were rejected.

    Raised when:
    - Neither token+endpoint nor account+key+endpoint is configured
    - HTTP 401 Unauthorized / 403 Forbidden
    - The session factory cannot establish a session
    """
    pass


class ResourceNotFound(SwiftError):
    """
    Container or object does not exist.

    Raised when:
    - HTTP 404 Not Found
    - A read-only open targets an absent object
    """
    pass


class ResourceConflict(SwiftError):
    """
    Exclusive create ('x' modes) against an object that already exists.
    """
    pass


class TransportError(SwiftError):
    """
    Any other remote or transport failure.

    Raised when:
    - HTTP status >= 400 not covered above
    - Connection, timeout and protocol errors from the HTTP client
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "SwiftError",
    "MissingResourceIdentifier",
    "InvalidResourceIdentifier",
    "AuthenticationError",
    "ResourceNotFound",
    "ResourceConflict",
    "TransportError",
]
