"""Flags, errors and configuration for named semaphores."""

from namedsem.core.config import SemaphoreConfig
from namedsem.core.errors import (
    NameEncodingError,
    SemaphoreClosedError,
    SemaphoreError,
    SemaphoreOSError,
)
from namedsem.core.flags import AccessMode, OpenOptions

__all__ = [
    # Flags
    "OpenOptions",
    "AccessMode",
    # Errors
    "SemaphoreError",
    "NameEncodingError",
    "SemaphoreOSError",
    "SemaphoreClosedError",
    # Configuration
    "SemaphoreConfig",
]
