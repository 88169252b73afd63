"""Pytest configuration and fixtures."""

from __future__ import annotations

import contextlib
import sys
import uuid
from collections.abc import Iterator

import posix_ipc
import pytest

linux_only = pytest.mark.skipif(not sys.platform.startswith("linux"), reason="Linux semantics")

requires_getvalue = pytest.mark.skipif(
    not posix_ipc.SEMAPHORE_VALUE_SUPPORTED, reason="sem_getvalue not supported"
)


def unique_name(prefix: str = "namedsem") -> str:
    """Generate a unique semaphore name for test isolation."""
    return f"/{prefix}_{uuid.uuid4().hex[:8]}"


def unlink(name: str) -> None:
    """Remove a semaphore name, ignoring names that are already gone."""
    with contextlib.suppress(posix_ipc.ExistentialError):
        posix_ipc.unlink_semaphore(name)


def counter_value(name: str) -> int:
    """Read the kernel counter through an independent posix_ipc binding."""
    observer = posix_ipc.Semaphore(name)
    try:
        return observer.value
    finally:
        observer.close()


@pytest.fixture
def sem_name() -> Iterator[str]:
    """Unique semaphore name, unlinked after the test."""
    name = unique_name()
    yield name
    unlink(name)
