"""
Tests for open-mode interpretation.

Checks every mode token against its expected flag tuple, plus marker
stripping and the fallback for unknown tokens.
"""
from __future__ import annotations

import pytest

from swiftfs.modes import MODE_TABLE, ModeFlags, parse_mode


def _flags(mode: str) -> tuple:
    f = parse_mode(mode)
    return (f.can_read, f.can_write, f.truncate, f.append, f.create_if_absent, f.fail_if_exists, f.never_persist)


#           read   write  trunc  append create excl   never
EXPECTED = {
    "r":    (True,  False, False, False, False, False, False),
    "r+":   (True,  True,  False, False, False, False, False),
    "w":    (False, True,  True,  False, True,  False, False),
    "w+":   (True,  True,  True,  False, True,  False, False),
    "a":    (False, True,  False, True,  True,  False, False),
    "a+":   (True,  True,  False, True,  True,  False, False),
    "x":    (False, True,  False, False, True,  True,  False),
    "x+":   (True,  True,  False, False, True,  True,  False),
    "c":    (False, True,  False, False, True,  False, False),
    "c+":   (True,  True,  False, False, True,  False, False),
    "nope": (True,  True,  False, False, True,  False, True),
}


class TestModeTable:
    """Test the mode lookup table."""

    @pytest.mark.parametrize("mode,expected", sorted(EXPECTED.items()))
    def test_flags_match_table(self, mode, expected):
        """Test each known mode yields exactly its documented flags."""
        assert _flags(mode) == expected

    def test_table_has_no_extra_modes(self):
        """Test that the lookup table covers exactly the documented tokens."""
        assert set(MODE_TABLE) == set(EXPECTED)

    @pytest.mark.parametrize("mode", ["", "q", "rw", "r++", "nope+"])
    def test_unknown_modes_fall_back_to_read_write(self, mode):
        """Test unrecognized tokens get c+ semantics."""
        assert _flags(mode) == EXPECTED["c+"]


class TestModeMarkers:
    """Test case and binary/text marker handling."""

    @pytest.mark.parametrize("mode,base", [
        ("rb", "r"), ("rt", "r"), ("r+b", "r+"), ("rb+", "r+"),
        ("wb", "w"), ("ab+", "a+"), ("xt", "x"), ("cb", "c"),
    ])
    def test_markers_have_no_effect(self, mode, base):
        """Test that b/t markers are stripped."""
        assert parse_mode(mode) == parse_mode(base)

    @pytest.mark.parametrize("mode,base", [("R", "r"), ("W+", "w+"), ("NOPE", "nope"), ("Rb", "r")])
    def test_case_insensitive(self, mode, base):
        """Test mode tokens are case-insensitive."""
        assert parse_mode(mode) == parse_mode(base)

    def test_flags_are_immutable(self):
        """Test that flag sets cannot be modified after parsing."""
        flags = parse_mode("r")
        with pytest.raises(AttributeError):
            flags.can_write = True  # type: ignore[misc]


class TestIoMode:
    """Test translation to builtin open() mode strings."""

    @pytest.mark.parametrize("mode,io_mode", [
        ("r", "rb"), ("r+", "r+b"), ("w", "wb"), ("w+", "w+b"),
        ("a", "ab"), ("a+", "a+b"), ("x", "xb"), ("x+", "x+b"),
        ("c+", "r+b"), ("nope", "r+b"),
    ])
    def test_to_io_mode(self, mode, io_mode):
        """Test io mode labels used by SwiftFile.mode."""
        assert parse_mode(mode).to_io_mode() == io_mode

    def test_default_flags_create(self):
        """Test bare ModeFlags defaults to create-on-missing."""
        assert ModeFlags().create_if_absent is True
