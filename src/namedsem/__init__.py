"""namedsem - Named POSIX semaphores for inter-process synchronization.

Opens kernel counting semaphores by name so that unrelated processes can
post to and wait on the same counter.
"""

__version__ = "0.1.0"

# Handle
from namedsem.backplane.semaphore import NamedSemaphore

# Configuration
from namedsem.core.config import SemaphoreConfig

# Errors
from namedsem.core.errors import (
    NameEncodingError,
    SemaphoreClosedError,
    SemaphoreError,
    SemaphoreOSError,
)

# Flags
from namedsem.core.flags import AccessMode, OpenOptions

__all__ = [
    # Version
    "__version__",
    # Handle
    "NamedSemaphore",
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
