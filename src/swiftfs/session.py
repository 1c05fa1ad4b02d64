"""
Stream sessions over remote objects.

A StreamSession gives one open handle file semantics on top of a
whole-object-replace store: the object is fetched (or created) at open,
every read/write/seek works on a local buffer, and the buffer is written
back in full on flush and close. This module also provides the
locator-bound entry points that need no open handle (stat and delete).

Everything here raises the typed errors from :mod:`swiftfs.storage.errors`;
:mod:`swiftfs.wrapper` converts them into boolean/sentinel results.
"""
from __future__ import annotations

import io
import logging
from enum import IntEnum
from typing import Any, BinaryIO, Optional

from .buffer import ObjectBuffer
from .metadata import StatResult, generate_stat
from .modes import ModeFlags, parse_mode
from .settings import DEFAULT_SPOOL_MAX_SIZE, ConfigResolver
from .storage.base import Container, FetchFailed, Found, NotFound, ObjectInfo, ObjectStorage, SessionFactory
from .storage.errors import (
    AuthenticationError,
    ResourceConflict,
    ResourceNotFound,
    SwiftError,
    TransportError,
)
from .storage.swift_http import SwiftSessionFactory
from .storage.uri import ParsedURI, parse_swift_uri

__all__ = ["StreamOption", "StreamSession", "connect", "stat_url", "delete_object"]

logger = logging.getLogger(__name__)


class StreamOption(IntEnum):
    """Options accepted by :meth:`StreamSession.set_option`."""
    BLOCKING = 1
    WRITE_BUFFER = 3
    READ_TIMEOUT = 4


def _resolver_for(uri: ParsedURI, resolver: Optional[ConfigResolver]) -> ConfigResolver:
    resolver = resolver or ConfigResolver()
    if resolver.scheme != uri.scheme:
        resolver = resolver.for_scheme(uri.scheme)
    return resolver


def connect(resolver: ConfigResolver, factory: Optional[SessionFactory] = None) -> ObjectStorage:
    """
    Establish an object storage session from resolved configuration.

    A token with a storage endpoint is used as-is; otherwise account, key
    and the identity endpoint are required.

    Raises:
        AuthenticationError: If neither combination is configured, or the
            factory fails to establish a session
    """
    if factory is None:
        factory = SwiftSessionFactory(
            timeout_s=float(resolver.get("http_timeout_s", 30.0)),
            retries=int(resolver.get("http_retry", 0)),
        )

    token = resolver.get("token")
    storage_endpoint = resolver.get("swift_endpoint") or resolver.get("endpoint")

    try:
        if token and storage_endpoint:
            return factory.from_token(token, storage_endpoint)

        account = resolver.get("account")
        key = resolver.get("key")
        endpoint = resolver.get("endpoint")
        if not (account and key and endpoint):
            raise AuthenticationError("account, endpoint, key are required stream parameters")
        return factory.from_credentials(account, key, endpoint)
    except AuthenticationError:
        raise
    except SwiftError as e:
        raise AuthenticationError(f"Failed to initialize object storage: {e}") from e


class StreamSession:
    """
    One open handle on a remote object.

    The session owns its buffer and the storage session it was opened
    with; both are released on close. It is not thread-safe; two sessions
    on the same object work on independent copies and the last one to save
    wins.
    """

    def __init__(
        self,
        uri: ParsedURI,
        flags: ModeFlags,
        container: Container,
        info: ObjectInfo,
        buffer: ObjectBuffer,
        storage: Optional[ObjectStorage] = None,
    ) -> None:
        self.uri = uri
        self.flags = flags
        self.container = container
        self.info = info
        self.buffer = buffer
        self.storage = storage
        self.last_error: Optional[BaseException] = None
        self._closed = False

    @classmethod
    def open(
        cls,
        path: str,
        mode: str = "r",
        *,
        resolver: Optional[ConfigResolver] = None,
        factory: Optional[SessionFactory] = None,
    ) -> StreamSession:
        """
        Open a stream on ``path``.

        Args:
            path: Locator ``scheme://container/object``
            mode: Mode token, see :mod:`swiftfs.modes`
            resolver: Configuration for this call (defaults to an empty one)
            factory: Session factory (defaults to the HTTP collaborator)

        Raises:
            MissingResourceIdentifier: Container or object name missing
            InvalidResourceIdentifier: Locator escapes are not valid UTF-8
            AuthenticationError: No usable credentials
            ResourceNotFound: Container missing, or object missing in r/r+
            ResourceConflict: Object exists and mode is x/x+
            TransportError: Any other remote failure
        """
        uri = parse_swift_uri(path).require_identity()
        flags = parse_mode(mode)
        resolver = _resolver_for(uri, resolver)

        storage = connect(resolver, factory)
        try:
            container = storage.container(uri.container)

            max_size = int(resolver.get("spool_max_size", DEFAULT_SPOOL_MAX_SIZE))
            result = container.object(uri.name)

            if isinstance(result, Found):
                info = result.info
                buffer = cls._buffer_for_existing(uri, flags, result.stream, max_size)
            elif isinstance(result, NotFound):
                if not flags.create_if_absent:
                    raise ResourceNotFound(f"Object not found: {uri.container}/{uri.name}")
                logger.debug(f"Creating new object {uri.container}/{uri.name}")
                info = ObjectInfo(name=uri.name)
                # New objects are persisted on close even if nothing is written.
                buffer = ObjectBuffer.empty(max_size=max_size, dirty=True, never_persist=flags.never_persist)
            elif isinstance(result, FetchFailed):
                raise TransportError(f"Failed to fetch object: {result.error}") from result.error
            else:
                raise TransportError(f"Unexpected fetch result for {uri.original}: {result!r}")

            if flags.append:
                buffer.seek(0, io.SEEK_END)
        except BaseException:
            storage.close()
            raise

        return cls(uri, flags, container, info, buffer, storage)

    @staticmethod
    def _buffer_for_existing(uri: ParsedURI, flags: ModeFlags, stream: BinaryIO, max_size: int) -> ObjectBuffer:
        if flags.fail_if_exists:
            stream.close()
            raise ResourceConflict(f"File exists and cannot be overwritten: {uri.container}/{uri.name}")

        if flags.truncate:
            stream.close()
            logger.debug(f"Truncating {uri.container}/{uri.name}")
            return ObjectBuffer.empty(max_size=max_size, dirty=True, never_persist=flags.never_persist)

        if flags.can_write and (not stream.writable() or not flags.can_read):
            logger.debug(f"Copying {uri.container}/{uri.name} into a local buffer")
            try:
                return ObjectBuffer.copy_of(
                    stream,
                    rewind=not flags.append,
                    max_size=max_size,
                    never_persist=flags.never_persist,
                )
            finally:
                stream.close()

        return ObjectBuffer(stream, never_persist=flags.never_persist)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dirty(self) -> bool:
        return self.buffer.dirty

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed stream")

    def _check_readable(self) -> None:
        self._check_open()
        if not self.flags.can_read:
            raise io.UnsupportedOperation("Stream not open for reading")

    def _check_writable(self) -> None:
        self._check_open()
        if not self.flags.can_write:
            raise io.UnsupportedOperation("Stream not open for writing")

    def read(self, size: int = -1) -> bytes:
        self._check_readable()
        return self.buffer.read(size)

    def readinto(self, target) -> int:
        self._check_readable()
        return self.buffer.readinto(target)

    def write(self, data: bytes) -> int:
        self._check_writable()
        return self.buffer.write(data)

    def truncate(self, size: int) -> int:
        self._check_writable()
        return self.buffer.truncate(size)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        return self.buffer.seek(offset, whence)

    def tell(self) -> int:
        self._check_open()
        return self.buffer.tell()

    def eof(self) -> bool:
        self._check_open()
        return self.buffer.eof()

    def _save(self, stream: BinaryIO) -> None:
        self.info = self.container.save(self.info, stream)

    def flush(self) -> bool:
        """
        Write the buffer back to the store if it has unsaved changes.

        Returns:
            True if a save was performed

        Raises:
            SwiftError: If the save fails; the session stays dirty
        """
        self._check_open()
        saved = self.buffer.synchronize(self._save)
        if saved:
            logger.info(f"Wrote {self.uri.container}/{self.uri.name}")
        return saved

    def close(self) -> bool:
        """
        Flush once more, then release the local buffer and the storage
        session.

        Synchronization failures are logged and kept in ``last_error``; both
        are released either way.

        Returns:
            True if the final synchronization succeeded (or was not needed)
        """
        if self._closed:
            return True
        ok = True
        try:
            self.flush()
        except (SwiftError, OSError) as e:
            logger.warning(f"Error while closing {self.uri.original}: {e}")
            self.last_error = e
            ok = False
        finally:
            self.buffer.release()
            self._closed = True
            if self.storage is not None:
                self.storage.close()
        return ok

    def stat(self) -> StatResult:
        """Stat record for this handle; size includes unsaved writes."""
        self._check_open()
        return generate_stat(self.info, self.container, self.buffer.size())

    def set_option(self, option: int, arg1: Any = None, arg2: Any = None) -> bool:
        """
        Set a local stream option.

        Options affect the local buffer only, never the network transport.
        Unknown options return False.
        """
        self._check_open()
        if option == StreamOption.BLOCKING:
            self.buffer.options["blocking"] = bool(arg1)
        elif option == StreamOption.READ_TIMEOUT:
            self.buffer.options["read_timeout"] = float(arg1 or 0) + float(arg2 or 0) / 1_000_000
        elif option == StreamOption.WRITE_BUFFER:
            self.buffer.options["write_buffer"] = arg2
        else:
            return False
        return True

    def cast(self) -> BinaryIO:
        """The underlying local stream."""
        self._check_open()
        return self.buffer.stream


def stat_url(
    path: str,
    *,
    resolver: Optional[ConfigResolver] = None,
    factory: Optional[SessionFactory] = None,
) -> Optional[StatResult]:
    """
    Stat a locator without opening it.

    Only metadata is requested from the store; the object body is never
    transferred.

    Returns:
        StatResult, or None if the locator is incomplete or the container or
        object does not exist

    Raises:
        InvalidResourceIdentifier: Locator escapes are not valid UTF-8
        AuthenticationError: No usable credentials
        TransportError: Other remote failures
    """
    uri = parse_swift_uri(path)
    if not uri.is_complete:
        return None

    storage = connect(_resolver_for(uri, resolver), factory)
    try:
        container = storage.container(uri.container)
        info = container.remote_object(uri.name)
    except ResourceNotFound:
        logger.debug(f"Stat target not found: {uri.original}")
        return None
    finally:
        storage.close()

    return generate_stat(info, container, info.content_length)


def delete_object(
    path: str,
    *,
    resolver: Optional[ConfigResolver] = None,
    factory: Optional[SessionFactory] = None,
) -> bool:
    """
    Delete the object a locator names.

    The locator is validated before any remote call.

    Raises:
        MissingResourceIdentifier: Container or object name missing
        InvalidResourceIdentifier: Locator escapes are not valid UTF-8
        AuthenticationError: No usable credentials
        ResourceNotFound: Container or object does not exist
        TransportError: Other remote failures
    """
    uri = parse_swift_uri(path).require_identity()
    storage = connect(_resolver_for(uri, resolver), factory)
    try:
        container = storage.container(uri.container)
        return container.delete(uri.name)
    finally:
        storage.close()
