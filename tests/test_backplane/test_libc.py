"""Tests for the ctypes semaphore bindings."""

from __future__ import annotations

import errno
import os

import pytest

from namedsem.backplane import libc
from namedsem.core.errors import SemaphoreOSError


class TestLoad:
    """Tests for loading the C library."""

    def test_load_is_cached(self) -> None:
        """Should return the same library object on every call."""
        assert libc.load() is libc.load()

    def test_exports_semaphore_api(self) -> None:
        """Loaded library should export the sem_* calls."""
        lib = libc.load()
        for symbol in ("sem_open", "sem_post", "sem_wait", "sem_close"):
            assert hasattr(lib, symbol)

    def test_library_name(self) -> None:
        """Should report a non-empty library name."""
        assert libc.library_name()


class TestSemValueMax:
    """Tests for sem_value_max."""

    def test_at_least_posix_minimum(self) -> None:
        """Should be at least the POSIX minimum."""
        assert libc.sem_value_max() >= 32767

    def test_fallback_when_sysconf_unknown(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should fall back to the POSIX minimum if sysconf has no answer."""

        def _unknown(_name: str) -> int:
            raise ValueError("unrecognized configuration name")

        monkeypatch.setattr(os, "sysconf", _unknown)
        assert libc.sem_value_max() == 32767


class TestCalls:
    """Tests for the raw call wrappers."""

    def test_open_missing_raises_enoent(self, sem_name: str) -> None:
        """Opening a missing name without O_CREAT should raise ENOENT."""
        with pytest.raises(SemaphoreOSError) as exc_info:
            libc.sem_open(os.fsencode(sem_name), 0, 0, 0)
        assert exc_info.value.errno == errno.ENOENT
        assert exc_info.value.operation == "sem_open"
        assert exc_info.value.name == sem_name

    def test_open_post_wait_close(self, sem_name: str) -> None:
        """Raw calls should round-trip the counter."""
        ptr = libc.sem_open(os.fsencode(sem_name), os.O_CREAT, 0o600, 0)
        try:
            libc.sem_post(ptr)
            libc.sem_wait(ptr)
        finally:
            assert libc.sem_close(ptr) == 0
