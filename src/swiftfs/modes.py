"""
Open-mode interpretation.

Maps an ``fopen``-style mode token onto the capability flags a stream
session needs. The mapping is an explicit table so each mode's flag set can
be checked on its own.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

__all__ = ["ModeFlags", "MODE_TABLE", "DEBUG_MODE", "parse_mode"]

DEBUG_MODE = "nope"


@dataclass(frozen=True)
class ModeFlags:
    """
    Capabilities derived from a mode token.

    Invariants:
    - fail_if_exists implies create_if_absent
    - never_persist sessions never reach the container's save operation
    """
    can_read: bool = False
    can_write: bool = False
    truncate: bool = False
    append: bool = False
    create_if_absent: bool = True
    fail_if_exists: bool = False
    never_persist: bool = False

    def to_io_mode(self) -> str:
        """Closest builtin ``open()`` mode string, used for ``SwiftFile.mode``."""
        if self.append:
            base = "a"
        elif self.fail_if_exists:
            base = "x"
        elif self.truncate:
            base = "w"
        elif self.can_write and not self.can_read:
            base = "w"
        else:
            base = "r"
        plus = "+" if self.can_read and self.can_write else ""
        return f"{base}{plus}b"


_READ_WRITE = ModeFlags(can_read=True, can_write=True)

MODE_TABLE: Dict[str, ModeFlags] = {
    "r": ModeFlags(can_read=True, create_if_absent=False),
    "r+": ModeFlags(can_read=True, can_write=True, create_if_absent=False),
    "w": ModeFlags(can_write=True, truncate=True),
    "w+": ModeFlags(can_read=True, can_write=True, truncate=True),
    "a": ModeFlags(can_write=True, append=True),
    "a+": ModeFlags(can_read=True, can_write=True, append=True),
    "x": ModeFlags(can_write=True, fail_if_exists=True),
    "x+": ModeFlags(can_read=True, can_write=True, fail_if_exists=True),
    "c": ModeFlags(can_write=True),
    "c+": _READ_WRITE,
    # Full read/write that is never written back to the store.
    DEBUG_MODE: ModeFlags(can_read=True, can_write=True, never_persist=True),
}


def parse_mode(mode: str) -> ModeFlags:
    """
    Interpret a mode token.

    The token is case-insensitive. ``b`` and ``t`` markers are stripped
    because the store does not distinguish text from binary content. Tokens
    not in :data:`MODE_TABLE` get read/write/create semantics, like ``c+``.

    Args:
        mode: Mode token such as ``"rb"``, ``"w+"`` or ``"nope"``

    Returns:
        Immutable flag set for the session
    """
    token = mode.lower().replace("b", "").replace("t", "")
    return MODE_TABLE.get(token, _READ_WRITE)
