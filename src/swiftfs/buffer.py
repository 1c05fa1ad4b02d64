"""
Local buffer standing in for a remote object's content.

All reads, writes and seeks happen against this buffer. The remote store is
only touched by :meth:`ObjectBuffer.synchronize`, which writes the whole
buffer back when it is dirty.
"""
from __future__ import annotations

import io
import logging
import shutil
import tempfile
from typing import Any, BinaryIO, Callable, Dict

from .settings import DEFAULT_SPOOL_MAX_SIZE

__all__ = ["ObjectBuffer"]

logger = logging.getLogger(__name__)


class ObjectBuffer:
    """
    Scratch copy of one object plus its dirty flag.

    Invariants:
    - ``dirty`` is True iff content changed since the last successful save
      (or the object has never been saved at all)
    - a failed save never clears ``dirty``
    - :meth:`synchronize` leaves the cursor where it found it
    """

    def __init__(self, stream: BinaryIO, *, dirty: bool = False, never_persist: bool = False) -> None:
        self.stream = stream
        self.dirty = dirty
        self.never_persist = never_persist
        # Local stream options; they never reach the network transport.
        self.options: Dict[str, Any] = {"blocking": True, "read_timeout": None, "write_buffer": None}

    @classmethod
    def empty(cls, *, max_size: int = DEFAULT_SPOOL_MAX_SIZE, **kwargs) -> ObjectBuffer:
        """New empty buffer, kept in memory up to ``max_size`` bytes."""
        return cls(tempfile.SpooledTemporaryFile(max_size=max_size, mode="w+b"), **kwargs)

    @classmethod
    def copy_of(cls, source: BinaryIO, *, rewind: bool = True, max_size: int = DEFAULT_SPOOL_MAX_SIZE, **kwargs) -> ObjectBuffer:
        """
        Copy ``source`` into a fresh writable buffer.

        The copy is left positioned at its end when ``rewind`` is False.
        """
        buffer = cls.empty(max_size=max_size, **kwargs)
        try:
            shutil.copyfileobj(source, buffer.stream)
        except BaseException:
            buffer.release()
            raise
        if rewind:
            buffer.stream.seek(0)
        return buffer

    @property
    def closed(self) -> bool:
        return self.stream.closed

    def read(self, size: int = -1) -> bytes:
        return self.stream.read(size)

    def readinto(self, target) -> int:
        data = self.stream.read(len(target))
        target[: len(data)] = data
        return len(data)

    def write(self, data: bytes) -> int:
        self.dirty = True
        written = self.stream.write(data)
        return len(data) if written is None else written

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self.stream.seek(offset, whence)

    def tell(self) -> int:
        return self.stream.tell()

    def truncate(self, size: int) -> int:
        self.dirty = True
        return self.stream.truncate(size)

    def size(self) -> int:
        """Current content length, including unsaved writes."""
        position = self.stream.tell()
        try:
            return self.stream.seek(0, io.SEEK_END)
        finally:
            self.stream.seek(position)

    def eof(self) -> bool:
        return self.tell() >= self.size()

    def synchronize(self, save: Callable[[BinaryIO], Any]) -> bool:
        """
        Write the buffer back through ``save`` if it is dirty.

        ``save`` receives the stream rewound to the start. The cursor is
        restored afterwards and ``dirty`` is cleared only once ``save``
        returns. Exceptions from ``save`` propagate with ``dirty`` still set.

        Returns:
            True if a save was performed
        """
        if self.never_persist:
            logger.debug("Never-persist buffer, skipping write")
            return False
        if not self.dirty:
            logger.debug("Buffer not dirty, skipping write")
            return False

        position = self.stream.tell()
        self.stream.seek(0)
        try:
            save(self.stream)
        finally:
            self.stream.seek(position)
        self.dirty = False
        return True

    def release(self) -> None:
        """Close the local stream. Safe to call more than once."""
        if not self.stream.closed:
            self.stream.close()
