"""Open-option and access-mode bit-sets for named semaphores."""

from __future__ import annotations

import os
import stat
from enum import IntFlag


class OpenOptions(IntFlag):
    """How ``sem_open`` should behave.

    Members are abstract capability bits; ``os_flags`` gives the host's
    ``O_*`` encoding. Combinations are not validated, the OS decides what
    they mean.
    """

    NONE = 0
    CREATE = 1 << 0  # Create if not exists
    READ = 1 << 1  # Open for read
    WRITE = 1 << 2  # Open for write
    EXCLUSIVE = 1 << 3  # With CREATE: fail if the name exists

    @property
    def os_flags(self) -> int:
        """Host ``O_*`` bits for this set, OR-ed verbatim."""
        bits = 0
        for member, os_bit in _OS_OPEN_FLAGS.items():
            if member in self:
                bits |= os_bit
        return bits


_OS_OPEN_FLAGS = {
    OpenOptions.CREATE: os.O_CREAT,
    OpenOptions.READ: os.O_RDONLY,
    OpenOptions.WRITE: os.O_WRONLY,
    OpenOptions.EXCLUSIVE: os.O_EXCL,
}


class AccessMode(IntFlag):
    """Permission bits applied when a semaphore is newly created."""

    NONE = 0
    R_USR = stat.S_IRUSR  # User read
    W_USR = stat.S_IWUSR  # User write
    R_GRP = stat.S_IRGRP  # Group read
    W_GRP = stat.S_IWGRP  # Group write
    R_OTH = stat.S_IROTH  # Other read
    W_OTH = stat.S_IWOTH  # Other write

    @classmethod
    def from_octal(cls, value: int | str) -> AccessMode:
        """Build a mode from an octal permission value.

        Accepts ints (``0o640``) or strings (``"640"``, ``"0o640"``). Bits
        outside the six read/write bits are dropped.

        Raises:
            ValueError: If a string is not valid octal
        """
        if isinstance(value, str):
            value = parse_octal(value)
        return cls(value & _ALL_BITS)


_ALL_BITS = (
    AccessMode.R_USR
    | AccessMode.W_USR
    | AccessMode.R_GRP
    | AccessMode.W_GRP
    | AccessMode.R_OTH
    | AccessMode.W_OTH
)


def parse_octal(text: str) -> int:
    """Parse an octal permission string (``"640"``, ``"0o640"``) without masking.

    Raises:
        ValueError: If the string is not valid octal
    """
    text = text.strip().lower().removeprefix("0o")
    return int(text, 8)
