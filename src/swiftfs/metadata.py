"""
Stat records synthesized from object storage metadata.

The store only knows an object's size, a single modification time and its
container's ACL. This module turns that into the thirteen-field record
conventional stat consumers expect.
"""
from __future__ import annotations

import os
from typing import Dict, NamedTuple, Tuple

from .storage.base import ACL, Container, ObjectInfo

__all__ = ["StatResult", "ACL_MODES", "mode_for_acl", "process_owner", "generate_stat"]

# Regular file (0o100000) with group access; public adds world read/execute.
ACL_MODES: Dict[ACL, int] = {
    ACL.PUBLIC: 0o100775,
    ACL.PRIVATE: 0o100770,
}


class StatResult(NamedTuple):
    """Stat record, addressable by position or by field name."""
    dev: int
    ino: int
    mode: int
    nlink: int
    uid: int
    gid: int
    rdev: int
    size: int
    atime: int
    mtime: int
    ctime: int
    blksize: int
    blocks: int

    def as_os_stat(self) -> os.stat_result:
        """Equivalent ``os.stat_result`` for code that expects ``st_*`` attributes."""
        return os.stat_result((
            self.mode, self.ino, self.dev, self.nlink, self.uid, self.gid,
            self.size, self.atime, self.mtime, self.ctime,
        ))


def mode_for_acl(acl: ACL) -> int:
    return ACL_MODES[acl]


def process_owner() -> Tuple[int, int]:
    """
    Effective uid/gid of this process, or (0, 0) where the platform has none.

    Objects are reported as owned by the caller so permission checks based
    on ownership succeed for anything the caller could open.
    """
    if hasattr(os, "geteuid") and hasattr(os, "getegid"):
        return os.geteuid(), os.getegid()
    return 0, 0


def generate_stat(info: ObjectInfo, container: Container, size: int) -> StatResult:
    """
    Build a stat record for an object.

    Args:
        info: Object identity; its modification time is used for all three
            timestamps, 0 if the object was never stored remotely
        container: Owning container, whose ACL selects the permission bits
        size: Size to report (buffer length for open handles)
    """
    uid, gid = process_owner()
    mtime = int(info.last_modified) if info.last_modified is not None else 0

    return StatResult(
        dev=0,
        ino=0,
        mode=mode_for_acl(container.acl()),
        nlink=0,
        uid=uid,
        gid=gid,
        rdev=0,
        size=size,
        atime=mtime,
        mtime=mtime,
        ctime=mtime,
        blksize=-1,
        blocks=-1,
    )
