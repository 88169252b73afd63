"""ctypes bindings for the POSIX named semaphore API.

Each wrapper makes exactly one C call and converts a failure into
``SemaphoreOSError`` carrying the errno reported for that call.

Calls go through ``ctypes.CDLL``, which releases the GIL for their
duration, so a thread blocked in ``sem_wait`` does not stop other threads
from posting.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import functools
import os

from namedsem.core.errors import SemaphoreOSError

# glibc defines SEM_FAILED as NULL, macOS and the BSDs as (sem_t *)-1
_SEM_FAILED = (None, 0, ctypes.c_void_p(-1).value)

# POSIX minimum for SEM_VALUE_MAX
_POSIX_SEM_VALUE_MAX = 32767

# Largest value the C unsigned int argument of sem_open can carry
C_UINT_MAX = ctypes.c_uint(-1).value


@functools.lru_cache(maxsize=1)
def load() -> ctypes.CDLL:
    """Load the C library providing the semaphore API.

    Older glibc keeps ``sem_*`` in libpthread; fall back to it, then to the
    symbols already loaded into the process.

    Raises:
        OSError: If no loaded library exports ``sem_open``
    """
    candidates = [ctypes.util.find_library("c"), ctypes.util.find_library("pthread"), None]
    for path in candidates:
        try:
            lib = ctypes.CDLL(path, use_errno=True)
        except OSError:
            continue
        if hasattr(lib, "sem_open"):
            _declare(lib)
            return lib
    raise OSError("No C library exporting sem_open found")


def _declare(lib: ctypes.CDLL) -> None:
    """Set argument and return types on the semaphore functions."""
    lib.sem_open.argtypes = [ctypes.c_char_p, ctypes.c_int, ctypes.c_uint, ctypes.c_uint]
    lib.sem_open.restype = ctypes.c_void_p

    for fn in (lib.sem_post, lib.sem_wait, lib.sem_close):
        fn.argtypes = [ctypes.c_void_p]
        fn.restype = ctypes.c_int


def library_name() -> str:
    """Name of the loaded C library, for diagnostics."""
    return load()._name or "<process>"


def sem_value_max() -> int:
    """Largest count a semaphore may hold on this host."""
    try:
        value = os.sysconf("SC_SEM_VALUE_MAX")
    except (ValueError, OSError):
        return _POSIX_SEM_VALUE_MAX
    return value if value > 0 else _POSIX_SEM_VALUE_MAX


def sem_open(name: bytes, oflag: int, mode: int, value: int) -> int:
    """Open (and possibly create) a named semaphore.

    Args:
        name: NUL-free encoded name
        oflag: Host ``O_*`` open flags
        mode: Permission bits used on creation
        value: Initial count used on creation

    Returns:
        Address of the ``sem_t`` bound by this call
    """
    ptr = load().sem_open(name, oflag, mode, value)
    if ptr in _SEM_FAILED:
        raise SemaphoreOSError(ctypes.get_errno(), "sem_open", os.fsdecode(name))
    return ptr


def sem_post(ptr: int, name: str | None = None) -> None:
    """Increment the semaphore at ``ptr``."""
    if load().sem_post(ptr) != 0:
        raise SemaphoreOSError(ctypes.get_errno(), "sem_post", name)


def sem_wait(ptr: int, name: str | None = None) -> None:
    """Decrement the semaphore at ``ptr``, blocking while it is zero."""
    if load().sem_wait(ptr) != 0:
        raise SemaphoreOSError(ctypes.get_errno(), "sem_wait", name)


def sem_close(ptr: int) -> int:
    """Release the local binding at ``ptr``.

    Returns:
        0 on success, otherwise the errno reported by ``sem_close``
    """
    if load().sem_close(ptr) != 0:
        return ctypes.get_errno()
    return 0
