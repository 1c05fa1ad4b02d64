"""
Fake object storage implementation for testing.

These classes explicitly subclass the storage protocols to ensure interface
changes break CI immediately, preventing silent drift.
"""
from __future__ import annotations

import hashlib
import io
import itertools
from typing import BinaryIO, Dict, List, Optional, Tuple

from ..base import ACL, Container, FetchFailed, FetchResult, Found, NotFound, ObjectInfo, ObjectStorage, SessionFactory
from ..errors import AuthenticationError, ResourceNotFound, SwiftError, TransportError

__all__ = ["FakeContainer", "FakeObjectStorage", "FakeSessionFactory"]


class FakeContainer(Container):
    """
    In-memory container for testing.

    This is a test double; not for production use.
    Records every call so tests can assert on remote traffic.
    """

    def __init__(self, name: str, *, acl: ACL = ACL.PRIVATE, writable_streams: bool = False) -> None:
        self.name = name
        self._acl = acl
        self.writable_streams = writable_streams
        self._objects: Dict[str, Tuple[bytes, ObjectInfo]] = {}
        self._clock = itertools.count(1_700_000_000)

        self.fetch_calls: List[str] = []
        self.metadata_calls: List[str] = []
        self.save_calls: List[str] = []
        self.delete_calls: List[str] = []

        # Set to make save() / object() fail.
        self.fail_saves = 0
        self.fetch_error: Optional[SwiftError] = None

    def acl(self) -> ACL:
        return self._acl

    def set_acl(self, acl: ACL) -> None:
        self._acl = acl

    def put(self, name: str, data: bytes, *, content_type: str = "application/octet-stream") -> ObjectInfo:
        """Seed an object directly (test utility, not counted as a save)."""
        info = ObjectInfo(
            name=name,
            content_length=len(data),
            content_type=content_type,
            etag=hashlib.md5(data).hexdigest(),
            last_modified=float(next(self._clock)),
        )
        self._objects[name] = (data, info)
        return info

    def content(self, name: str) -> bytes:
        """Stored bytes of an object (test utility)."""
        return self._objects[name][0]

    def __contains__(self, name: str) -> bool:
        return name in self._objects

    def object(self, name: str) -> FetchResult:
        self.fetch_calls.append(name)
        if self.fetch_error is not None:
            return FetchFailed(self.fetch_error)
        if name not in self._objects:
            return NotFound(name)
        data, info = self._objects[name]
        if self.writable_streams:
            stream: BinaryIO = io.BytesIO(data)
        else:
            stream = io.BufferedReader(io.BytesIO(data))
        return Found(info=info, stream=stream)

    def remote_object(self, name: str) -> ObjectInfo:
        self.metadata_calls.append(name)
        if name not in self._objects:
            raise ResourceNotFound(f"Not found: object {self.name}/{name}")
        return self._objects[name][1]

    def save(self, info: ObjectInfo, stream: BinaryIO) -> ObjectInfo:
        self.save_calls.append(info.name)
        if self.fail_saves:
            self.fail_saves -= 1
            raise TransportError(f"Injected save failure for {self.name}/{info.name}", status_code=503)
        return self.put(info.name, stream.read(), content_type=info.content_type)

    def delete(self, name: str) -> bool:
        self.delete_calls.append(name)
        if name not in self._objects:
            raise ResourceNotFound(f"Not found: object {self.name}/{name}")
        del self._objects[name]
        return True

    def clear(self) -> None:
        """Clear all stored data and call records (test utility)."""
        self._objects.clear()
        self.fetch_calls.clear()
        self.metadata_calls.clear()
        self.save_calls.clear()
        self.delete_calls.clear()


class FakeObjectStorage(ObjectStorage):
    """
    In-memory session holding named containers.

    This is a test double; not for production use.
    """

    def __init__(self) -> None:
        self._containers: Dict[str, FakeContainer] = {}
        self.container_calls: List[str] = []
        self.close_calls = 0

    def add_container(self, name: str, *, acl: ACL = ACL.PRIVATE, writable_streams: bool = False) -> FakeContainer:
        container = FakeContainer(name, acl=acl, writable_streams=writable_streams)
        self._containers[name] = container
        return container

    def container(self, name: str) -> FakeContainer:
        self.container_calls.append(name)
        if name not in self._containers:
            raise ResourceNotFound(f"Not found: container {name}")
        return self._containers[name]

    def close(self) -> None:
        # Shared across sessions by FakeSessionFactory, so only recorded.
        self.close_calls += 1


class FakeSessionFactory(SessionFactory):
    """
    Session factory that hands out one shared FakeObjectStorage.

    Accepts any token, and account/key pairs registered in ``accounts``
    (any pair when ``accounts`` is None).
    """

    def __init__(self, storage: Optional[FakeObjectStorage] = None, *, accounts: Optional[Dict[str, str]] = None) -> None:
        self.storage = storage if storage is not None else FakeObjectStorage()
        self.accounts = accounts
        self.token_calls: List[Tuple[str, str]] = []
        self.credential_calls: List[Tuple[str, str]] = []

    @property
    def calls(self) -> int:
        """Number of session establishments attempted."""
        return len(self.token_calls) + len(self.credential_calls)

    def from_token(self, token: str, endpoint: str) -> FakeObjectStorage:
        self.token_calls.append((token, endpoint))
        return self.storage

    def from_credentials(self, account: str, key: str, endpoint: str) -> FakeObjectStorage:
        self.credential_calls.append((account, endpoint))
        if self.accounts is not None and self.accounts.get(account) != key:
            raise AuthenticationError(f"Authentication failed for account {account}")
        return self.storage
