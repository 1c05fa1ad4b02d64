"""
File objects backed by stream sessions.

``swiftfs.open()`` returns a SwiftFile, an ``io.RawIOBase`` that ordinary
file-oriented code can use directly or wrap in ``io.BufferedReader`` /
``io.TextIOWrapper``. Unlike the wrapper contract it raises on failure, the
way the builtin ``open()`` does.
"""
from __future__ import annotations

import io
from typing import Any, Callable, Mapping, Optional

from .metadata import StatResult
from .session import StreamSession
from .settings import ConfigResolver, Settings
from .storage.base import SessionFactory
from .storage.uri import DEFAULT_SCHEME, parse_swift_uri

__all__ = ["SwiftFile", "open"]


class SwiftFile(io.RawIOBase):
    """Raw binary file over one :class:`StreamSession`."""

    def __init__(self, session: StreamSession) -> None:
        super().__init__()
        self._session = session
        self.name = session.uri.original
        self.mode = session.flags.to_io_mode()

    @property
    def session(self) -> StreamSession:
        return self._session

    def readable(self) -> bool:
        return self._session.flags.can_read

    def writable(self) -> bool:
        return self._session.flags.can_write

    def seekable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        return self._session.readinto(memoryview(b).cast("B"))

    def readall(self) -> bytes:
        return self._session.read(-1)

    def write(self, b) -> int:
        return self._session.write(bytes(b))

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._session.seek(offset, whence)

    def tell(self) -> int:
        return self._session.tell()

    def truncate(self, size: Optional[int] = None) -> int:
        if size is None:
            size = self.tell()
        return self._session.truncate(size)

    def flush(self) -> None:
        # IOBase.close() flushes after the session has already been closed.
        if self.closed or self._session.closed:
            return
        self._session.flush()

    def stat(self) -> StatResult:
        return self._session.stat()

    def close(self) -> None:
        """Write back and release. A failed write-back is raised after release."""
        if self.closed:
            return
        try:
            ok = self._session.close()
        finally:
            super().close()
        if not ok and self._session.last_error is not None:
            raise self._session.last_error


def open(
    url: str,
    mode: str = "r",
    *,
    context: Optional[Mapping[str, Mapping[str, Any]]] = None,
    settings: Optional[Settings] = None,
    defaults: Optional[Callable[[], Settings]] = None,
    factory: Optional[SessionFactory] = None,
    **options: Any,
) -> SwiftFile:
    """
    Open a remote object as a file.

    Args:
        url: Locator ``swift://container/object``
        mode: Mode token (``r``, ``w+``, ``a``, ``x``, ``c+``, ``nope``, ...)
        context: Options keyed by scheme name
        settings: Fixed default Settings
        defaults: Lazy provider of default Settings (ignored if ``settings`` given)
        factory: Session factory (defaults to the HTTP collaborator)
        **options: Options for this call, e.g. ``token=...``; merged over
            ``context`` for the locator's scheme

    Raises:
        MissingResourceIdentifier, AuthenticationError, ResourceNotFound,
        ResourceConflict, TransportError

    Example:
        >>> with swiftfs.open("swift://logs/app.txt", "a", token=tok, swift_endpoint=url) as f:
        ...     f.write(b"started\\n")
    """
    scheme = parse_swift_uri(url).scheme or DEFAULT_SCHEME
    merged = {key: dict(value) for key, value in (context or {}).items()}
    if options:
        merged.setdefault(scheme, {}).update(options)

    if settings is not None:
        def defaults() -> Settings:
            return settings

    resolver = ConfigResolver(merged, scheme=scheme, defaults=defaults)
    session = StreamSession.open(url, mode, resolver=resolver, factory=factory)
    return SwiftFile(session)
