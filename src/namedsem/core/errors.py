"""Exceptions raised by named semaphore handles."""

from __future__ import annotations

import os


class SemaphoreError(Exception):
    """Base class for all named semaphore errors."""


class NameEncodingError(SemaphoreError, ValueError):
    """Name cannot be passed to the OS as a NUL-terminated byte string.

    Raised before any OS call is made.
    """

    def __init__(self, name: object, reason: str = "embedded null byte") -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid semaphore name {name!r}: {reason}")


class SemaphoreOSError(SemaphoreError, OSError):
    """Failure reported by the OS semaphore API.

    The errno is carried verbatim; ``operation`` names the failing call.
    """

    def __init__(self, code: int, operation: str, name: str | None = None) -> None:
        super().__init__(code, os.strerror(code))
        self.operation = operation
        self.name = name

    @property
    def code(self) -> int:
        """OS error code (same as ``errno``)."""
        return self.errno

    def __str__(self) -> str:
        target = f" ({self.name})" if self.name is not None else ""
        return f"{self.operation}{target} failed: [Errno {self.errno}] {self.strerror}"


class SemaphoreClosedError(SemaphoreError, RuntimeError):
    """Operation attempted on a closed semaphore handle."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Semaphore {name!r} is closed")
