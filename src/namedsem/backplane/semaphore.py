"""Named POSIX semaphore handle.

A ``NamedSemaphore`` binds this process to a kernel semaphore identified
by name. Any number of processes may open the same name; each open call
yields its own independent binding, released by ``close()``.

Lifecycle:
    1. ``NamedSemaphore.open()`` - bind to (and possibly create) the semaphore
    2. ``post()`` / ``wait()`` - increment / blocking decrement, any number of times
    3. ``close()`` - release the local binding; the name stays in the system
"""

from __future__ import annotations

import contextlib
import errno
import os
from typing import Any, NoReturn

import structlog

from namedsem.backplane import libc
from namedsem.core.errors import NameEncodingError, SemaphoreClosedError, SemaphoreOSError
from namedsem.core.flags import AccessMode, OpenOptions

log = structlog.get_logger()

DEFAULT_OPTIONS = OpenOptions.CREATE | OpenOptions.READ | OpenOptions.WRITE
DEFAULT_MODE = AccessMode.R_USR | AccessMode.W_USR


def _encode_name(name: str | bytes | os.PathLike[str]) -> bytes:
    """Encode a name for ``sem_open``.

    Raises:
        NameEncodingError: If the name has no NUL-free byte form
    """
    try:
        encoded = os.fsencode(name)
    except UnicodeEncodeError as e:
        raise NameEncodingError(name, str(e)) from e
    if b"\0" in encoded:
        raise NameEncodingError(name)
    return encoded


class NamedSemaphore:
    """Handle to a named kernel counting semaphore.

    Construction either returns a bound handle or raises; there is no
    half-open state. The handle exclusively owns its binding, so it cannot
    be copied or pickled.

    Thread safety: one handle may be shared by many threads, with
    ``post()`` and ``wait()`` called concurrently and without extra locking.
    This rests on ``sem_post``/``sem_wait`` being safe to call concurrently
    on the same kernel object; the wrapper itself holds no lock. Calling
    ``close()`` while another thread is blocked in ``wait()`` is undefined
    at the OS level and must be avoided by the caller.

    Example:
        # Process A
        with NamedSemaphore.open("/jobs", OpenOptions.CREATE | OpenOptions.WRITE) as sem:
            sem.post()

        # Process B
        with NamedSemaphore.open("/jobs", OpenOptions.READ) as sem:
            sem.wait()
    """

    def __init__(
        self,
        name: str | bytes | os.PathLike[str],
        options: OpenOptions = DEFAULT_OPTIONS,
        mode: AccessMode = DEFAULT_MODE,
        initial: int = 0,
    ) -> None:
        """Open the semaphore called ``name``.

        Args:
            name: OS-level name, forwarded verbatim (e.g., "/my_sem")
            options: Open behavior flags
            mode: Permission bits, used only if the semaphore is created
            initial: Starting count, used only if the semaphore is created

        Raises:
            NameEncodingError: If name contains a null byte
            SemaphoreOSError: If the OS rejects the open
        """
        self._ptr: int | None = None
        encoded = _encode_name(name)
        self._name = os.fsdecode(encoded)

        # unsigned int on the C side; ctypes would wrap out-of-range values
        if not 0 <= initial <= libc.C_UINT_MAX:
            raise SemaphoreOSError(errno.EINVAL, "sem_open", self._name)

        self._ptr = libc.sem_open(encoded, OpenOptions(options).os_flags, int(mode), initial)
        log.debug(
            "Semaphore opened",
            name=self._name,
            options=OpenOptions(options).name,
            mode=f"{int(mode):#o}",
            initial=initial,
        )

    @classmethod
    def open(
        cls,
        name: str | bytes | os.PathLike[str],
        options: OpenOptions = DEFAULT_OPTIONS,
        mode: AccessMode = DEFAULT_MODE,
        initial: int = 0,
    ) -> NamedSemaphore:
        """Open a named semaphore. See ``__init__`` for arguments."""
        return cls(name, options, mode, initial)

    @property
    def name(self) -> str:
        """Semaphore name."""
        return self._name

    @property
    def closed(self) -> bool:
        """Whether the local binding has been released."""
        return self._ptr is None

    def post(self) -> None:
        """Increment the count, waking one waiter if any. Never blocks.

        Raises:
            SemaphoreClosedError: If the handle is closed
            SemaphoreOSError: If the OS rejects the post (e.g., EOVERFLOW)
        """
        libc.sem_post(self._require_open(), self._name)

    def wait(self) -> None:
        """Decrement the count, blocking until it is positive.

        There is no timeout. A signal delivered while blocked surfaces as
        ``SemaphoreOSError`` with ``errno.EINTR``; the wait is not retried.

        Raises:
            SemaphoreClosedError: If the handle is closed
            SemaphoreOSError: If the OS reports a failure
        """
        libc.sem_wait(self._require_open(), self._name)

    def close(self) -> None:
        """Release the local binding. Safe to call more than once.

        Never unlinks the name. A failure reported by ``sem_close`` is
        logged, not raised.
        """
        ptr, self._ptr = self._ptr, None
        if ptr is None:
            return
        err = libc.sem_close(ptr)
        if err:
            log.warning("Semaphore close failed", name=self._name, errno=err)
        else:
            log.debug("Semaphore closed", name=self._name)

    def _require_open(self) -> int:
        if self._ptr is None:
            raise SemaphoreClosedError(self._name)
        return self._ptr

    def __enter__(self) -> NamedSemaphore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __del__(self) -> None:
        # Module globals may already be gone during interpreter shutdown
        if getattr(self, "_ptr", None) is not None:
            with contextlib.suppress(Exception):
                self.close()

    def __copy__(self) -> NoReturn:
        raise TypeError("NamedSemaphore handles cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> NoReturn:
        raise TypeError("NamedSemaphore handles cannot be copied")

    def __reduce__(self) -> NoReturn:
        raise TypeError("NamedSemaphore handles cannot be pickled")

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<NamedSemaphore name={self._name!r} {state}>"
