"""
Storage layer: locator parsing, error taxonomy and collaborator protocols.

The HTTP collaborator lives in :mod:`swiftfs.storage.swift_http` and is
imported explicitly where needed.
"""
from .base import ACL, Container, FetchFailed, FetchResult, Found, NotFound, ObjectInfo, ObjectStorage, SessionFactory
from .errors import (
    AuthenticationError,
    InvalidResourceIdentifier,
    MissingResourceIdentifier,
    ResourceConflict,
    ResourceNotFound,
    SwiftError,
    TransportError,
)
from .uri import DEFAULT_SCHEME, ParsedURI, parse_swift_uri

__all__ = [
    "ACL",
    "Container",
    "FetchFailed",
    "FetchResult",
    "Found",
    "NotFound",
    "ObjectInfo",
    "ObjectStorage",
    "SessionFactory",
    "AuthenticationError",
    "MissingResourceIdentifier",
    "InvalidResourceIdentifier",
    "ResourceConflict",
    "ResourceNotFound",
    "SwiftError",
    "TransportError",
    "DEFAULT_SCHEME",
    "ParsedURI",
    "parse_swift_uri",
]
