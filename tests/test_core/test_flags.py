"""Tests for open-option and access-mode flags."""

from __future__ import annotations

import os
import stat

import pytest

from namedsem.core.flags import AccessMode, OpenOptions, parse_octal


class TestOpenOptions:
    """Tests for OpenOptions bit-set."""

    def test_members_are_independent_bits(self) -> None:
        """Each member should occupy its own bit."""
        members = [OpenOptions.CREATE, OpenOptions.READ, OpenOptions.WRITE, OpenOptions.EXCLUSIVE]
        combined = OpenOptions.NONE
        for member in members:
            assert not combined & member
            combined |= member
        assert bin(int(combined)).count("1") == len(members)

    def test_union_contains_members(self) -> None:
        """Union should contain exactly the combined members."""
        options = OpenOptions.CREATE | OpenOptions.WRITE
        assert OpenOptions.CREATE in options
        assert OpenOptions.WRITE in options
        assert OpenOptions.READ not in options

    def test_equality_and_hashing(self) -> None:
        """Equal combinations should compare and hash equal."""
        a = OpenOptions.CREATE | OpenOptions.READ
        b = OpenOptions.READ | OpenOptions.CREATE
        assert a == b
        assert hash(a) == hash(b)
        assert {a: "x"}[b] == "x"

    def test_ordering(self) -> None:
        """Options should be totally ordered."""
        values = sorted([OpenOptions.WRITE, OpenOptions.CREATE, OpenOptions.READ])
        assert values == [OpenOptions.CREATE, OpenOptions.READ, OpenOptions.WRITE]

    def test_os_flags_create(self) -> None:
        """CREATE should map to O_CREAT."""
        assert OpenOptions.CREATE.os_flags == os.O_CREAT

    def test_os_flags_exclusive(self) -> None:
        """CREATE|EXCLUSIVE should map to O_CREAT|O_EXCL."""
        options = OpenOptions.CREATE | OpenOptions.EXCLUSIVE
        assert options.os_flags == os.O_CREAT | os.O_EXCL

    def test_os_flags_passthrough(self) -> None:
        """Combinations should be OR-ed without validation."""
        options = OpenOptions.CREATE | OpenOptions.READ | OpenOptions.WRITE
        assert options.os_flags == os.O_CREAT | os.O_RDONLY | os.O_WRONLY

    def test_os_flags_none(self) -> None:
        """Empty set should map to no flags."""
        assert OpenOptions.NONE.os_flags == 0


class TestAccessMode:
    """Tests for AccessMode bit-set."""

    def test_members_match_permission_bits(self) -> None:
        """Members should carry the host permission bits."""
        assert AccessMode.R_USR == stat.S_IRUSR
        assert AccessMode.W_USR == stat.S_IWUSR
        assert AccessMode.R_GRP == stat.S_IRGRP
        assert AccessMode.W_GRP == stat.S_IWGRP
        assert AccessMode.R_OTH == stat.S_IROTH
        assert AccessMode.W_OTH == stat.S_IWOTH

    def test_union(self) -> None:
        """Union of user bits should equal 0o600."""
        assert int(AccessMode.R_USR | AccessMode.W_USR) == 0o600

    def test_hashable(self) -> None:
        """Modes should be usable as set members."""
        modes = {AccessMode.R_USR | AccessMode.R_GRP, AccessMode.R_GRP | AccessMode.R_USR}
        assert len(modes) == 1

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0o600, 0o600),
            ("640", 0o640),
            ("0o644", 0o644),
            (" 0O666 ", 0o666),
            (0o777, 0o666),
            (0o4755, 0o644),
        ],
    )
    def test_from_octal(self, value: int | str, expected: int) -> None:
        """Should parse octal values, keeping only read/write bits."""
        assert int(AccessMode.from_octal(value)) == expected

    def test_from_octal_invalid(self) -> None:
        """Should reject non-octal strings."""
        with pytest.raises(ValueError):
            AccessMode.from_octal("89")


class TestParseOctal:
    """Tests for parse_octal."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("640", 0o640), ("0o777", 0o777), (" 4755 ", 0o4755)],
    )
    def test_keeps_all_bits(self, text: str, expected: int) -> None:
        """Should parse octal strings without dropping any bits."""
        assert parse_octal(text) == expected

    def test_invalid(self) -> None:
        """Should reject non-octal strings."""
        with pytest.raises(ValueError):
            parse_octal("0x1f")
