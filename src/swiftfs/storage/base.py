"""
Storage interfaces for swiftfs.

These protocols define the boundary between the stream session and the
object storage collaborators, enabling dependency injection and testing
with fakes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from .errors import SwiftError

__all__ = [
    "ACL",
    "ObjectInfo",
    "Found",
    "NotFound",
    "FetchFailed",
    "FetchResult",
    "Container",
    "ObjectStorage",
    "SessionFactory",
]


class ACL(str, Enum):
    """Container visibility. The store has no finer-grained model."""
    PUBLIC = "public"
    PRIVATE = "private"


class ObjectInfo(BaseModel):
    """
    Identity and lightweight metadata of one object.

    ``last_modified`` is ``None`` for an object that so far exists only in
    a local buffer.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Object name within its container")
    content_length: int = Field(0, ge=0, description="Size in bytes as last reported by the store")
    content_type: str = Field("application/octet-stream", description="MIME type")
    etag: Optional[str] = Field(None, description="Entity tag (MD5 for Swift)")
    last_modified: Optional[float] = Field(None, description="Remote modification time, epoch seconds")

    @property
    def is_remote(self) -> bool:
        """True once the store has reported a modification time for this object."""
        return self.last_modified is not None


@dataclass(frozen=True)
class Found:
    """Object exists; ``stream`` is positioned at the start of its content."""
    info: ObjectInfo
    stream: BinaryIO


@dataclass(frozen=True)
class NotFound:
    """Object does not exist in the container."""
    name: str


@dataclass(frozen=True)
class FetchFailed:
    """Fetch failed for a reason other than absence."""
    error: SwiftError


FetchResult = Union[Found, NotFound, FetchFailed]


@runtime_checkable
class Container(Protocol):
    """Handle on one remote container."""

    name: str

    def acl(self) -> ACL:
        """Visibility of the container."""
        ...

    def object(self, name: str) -> FetchResult:
        """
        Fetch an object's content.

        Never raises for absence or transport failure; those are returned as
        :class:`NotFound` and :class:`FetchFailed`.
        """
        ...

    def remote_object(self, name: str) -> ObjectInfo:
        """
        Look up object metadata without transferring the body.

        Raises:
            ResourceNotFound: If the object does not exist
            TransportError: For other remote failures
        """
        ...

    def save(self, info: ObjectInfo, stream: BinaryIO) -> ObjectInfo:
        """
        Replace the object with the content of ``stream`` read from its
        current position to the end.

        Returns:
            Metadata of the stored object

        Raises:
            SwiftError: If the upload fails
        """
        ...

    def delete(self, name: str) -> bool:
        """
        Remove an object.

        Raises:
            ResourceNotFound: If the object does not exist
            TransportError: For other remote failures
        """
        ...


@runtime_checkable
class ObjectStorage(Protocol):
    """An authenticated session against the store."""

    def container(self, name: str) -> Container:
        """
        Look up a container. This is a remote round trip.

        Raises:
            ResourceNotFound: If the container does not exist
        """
        ...

    def close(self) -> None:
        """Release the session's connections. Safe to call more than once."""
        ...


@runtime_checkable
class SessionFactory(Protocol):
    """Creates authenticated sessions."""

    def from_token(self, token: str, endpoint: str) -> ObjectStorage:
        """Session from a pre-issued token and the storage endpoint."""
        ...

    def from_credentials(self, account: str, key: str, endpoint: str) -> ObjectStorage:
        """Session by authenticating account and key against the identity endpoint."""
        ...
