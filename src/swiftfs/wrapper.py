"""
Stream-wrapper boundary.

StreamWrapper exposes the stream-wrapper contract (stream_open, stream_read,
url_stat, unlink, ...) on top of StreamSession. Callers of this contract
expect failure signals instead of exceptions, so every method here turns an
error into a logged diagnostic plus a False/None/sentinel result. The last
error is kept on ``last_error`` for callers that want details.

Directory operations, rename and locking are part of the contract but are
not supported by object storage; they always report failure.
"""
from __future__ import annotations

import io
import logging
import warnings
from typing import Any, BinaryIO, Callable, Mapping, Optional, TypeVar

from .metadata import StatResult
from .session import StreamSession, delete_object, stat_url
from .settings import ConfigResolver, Settings
from .storage.base import SessionFactory
from .storage.errors import SwiftError

__all__ = ["StreamWarning", "StreamWrapper", "STREAM_REPORT_ERRORS", "STREAM_URL_STAT_QUIET"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

STREAM_REPORT_ERRORS = 8
STREAM_URL_STAT_QUIET = 2

# Failures the boundary converts into results. Programming errors
# (TypeError, AttributeError, ...) still propagate.
_REPORTED = (SwiftError, OSError, ValueError)


class StreamWarning(UserWarning):
    """Emitted for boundary failures when report-errors was requested."""


class StreamWrapper:
    """
    One stream, accessed through the non-throwing wrapper contract.

    Args:
        context: Call-scoped options keyed by scheme name, e.g.
            ``{"swift": {"token": "...", "swift_endpoint": "..."}}``
        defaults: Provider of process-wide default Settings, called lazily
        factory: Session factory (defaults to the HTTP collaborator)
    """

    def __init__(
        self,
        context: Optional[Mapping[str, Mapping[str, Any]]] = None,
        *,
        defaults: Optional[Callable[[], Settings]] = None,
        factory: Optional[SessionFactory] = None,
    ) -> None:
        self.resolver = ConfigResolver(context, defaults=defaults)
        self.factory = factory
        self.session: Optional[StreamSession] = None
        self.last_error: Optional[BaseException] = None
        self.report_errors = False

    def _report(self, message: str, error: BaseException, *, quiet: bool = False) -> None:
        self.last_error = error
        if not quiet:
            logger.warning(f"{message}: {error}")
        if self.report_errors:
            warnings.warn(f"{message}: {error}", StreamWarning, stacklevel=3)

    def _guard(self, message: str, func: Callable[[], T], failure: T) -> T:
        try:
            return func()
        except _REPORTED as e:
            self._report(message, e)
            return failure

    def _require_session(self) -> StreamSession:
        if self.session is None:
            raise ValueError("Stream is not open")
        return self.session

    # Stream operations

    def stream_open(self, path: str, mode: str, options: int = 0) -> bool:
        """
        Open ``path``; True on success. Never leaves a half-open session.

        A session still open on this wrapper is closed first, so its
        unsaved writes are synchronized rather than dropped.
        """
        previous = self.session
        if previous is not None and not previous.closed:
            logger.debug(f"Closing {previous.uri.original} before opening {path}")
            self.stream_close()
        self.session = None
        self.report_errors = bool(options & STREAM_REPORT_ERRORS)

        def _open() -> bool:
            self.session = StreamSession.open(path, mode, resolver=self.resolver, factory=self.factory)
            return True

        return self._guard(f"Failed to open {path}", _open, False)

    def stream_read(self, count: int) -> bytes:
        return self._guard("Error while reading", lambda: self._require_session().read(count), b"")

    def stream_write(self, data: bytes) -> int:
        return self._guard("Error while writing", lambda: self._require_session().write(data), 0)

    def stream_seek(self, offset: int, whence: int = io.SEEK_SET) -> bool:
        def _seek() -> bool:
            self._require_session().seek(offset, whence)
            return True

        return self._guard("Error while seeking", _seek, False)

    def stream_tell(self) -> int:
        return self._guard("Error while telling", lambda: self._require_session().tell(), -1)

    def stream_eof(self) -> bool:
        return self._guard("Error while checking eof", lambda: self._require_session().eof(), True)

    def stream_flush(self) -> bool:
        def _flush() -> bool:
            self._require_session().flush()
            return True

        return self._guard("Error while flushing", _flush, False)

    def stream_close(self) -> bool:
        """Final synchronization, then release. The buffer is always released."""
        session = self.session
        if session is None:
            return False
        ok = session.close()
        if not ok and session.last_error is not None:
            self.last_error = session.last_error
            if self.report_errors:
                warnings.warn(f"Error while closing: {session.last_error}", StreamWarning, stacklevel=2)
        return ok

    def stream_stat(self) -> Optional[StatResult]:
        return self._guard("Error while stating stream", lambda: self._require_session().stat(), None)

    def stream_set_option(self, option: int, arg1: Any = None, arg2: Any = None) -> bool:
        return self._guard(
            "Error while setting option",
            lambda: self._require_session().set_option(option, arg1, arg2),
            False,
        )

    def stream_cast(self, cast_as: int = 0) -> Optional[BinaryIO]:
        return self._guard("Error while casting", lambda: self._require_session().cast(), None)

    def stream_lock(self, operation: int) -> bool:
        """Locking is not supported; each handle works on its own copy."""
        logger.debug("stream_lock is not supported")
        return False

    # Locator operations

    def unlink(self, path: str) -> bool:
        """Delete an object; False if the locator is incomplete or deletion fails."""
        return self._guard(
            f"Error during unlink of {path}",
            lambda: delete_object(path, resolver=self.resolver, factory=self.factory),
            False,
        )

    def url_stat(self, path: str, flags: int = 0) -> Optional[StatResult]:
        """Metadata-only stat; None when the target does not exist or on failure."""
        try:
            return stat_url(path, resolver=self.resolver, factory=self.factory)
        except _REPORTED as e:
            self._report(f"Could not stat remote file {path}", e, quiet=bool(flags & STREAM_URL_STAT_QUIET))
            return None

    # Unsupported directory surface

    def dir_opendir(self, path: str, options: int = 0) -> bool:
        """Not supported: object storage has no directories."""
        logger.debug("dir_opendir is not supported")
        return False

    def dir_readdir(self) -> Optional[str]:
        """Not supported: always None."""
        logger.debug("dir_readdir is not supported")
        return None

    def dir_rewinddir(self) -> bool:
        """Not supported."""
        logger.debug("dir_rewinddir is not supported")
        return False

    def dir_closedir(self) -> bool:
        """Not supported."""
        logger.debug("dir_closedir is not supported")
        return False

    def mkdir(self, path: str, mode: int = 0o777, options: int = 0) -> bool:
        """Not supported: containers are not created through streams."""
        logger.debug("mkdir is not supported")
        return False

    def rmdir(self, path: str, options: int = 0) -> bool:
        """Not supported: containers are not removed through streams."""
        logger.debug("rmdir is not supported")
        return False

    def rename(self, path_from: str, path_to: str) -> bool:
        """Not supported."""
        logger.debug("rename is not supported")
        return False
