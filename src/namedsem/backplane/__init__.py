"""OS binding and handle for named semaphores.

This package provides the IPC layer of namedsem:
- ctypes bindings for the POSIX sem_* calls
- The NamedSemaphore handle built on them
"""

from namedsem.backplane.semaphore import NamedSemaphore

__all__ = [
    "NamedSemaphore",
]
