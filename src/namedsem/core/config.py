"""Configuration schema and loading for named semaphores.

A semaphore can be described in YAML and opened from that description,
so cooperating processes can share a single definition file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, field_validator

from namedsem.core.flags import AccessMode, OpenOptions, parse_octal

if TYPE_CHECKING:
    from namedsem.backplane.semaphore import NamedSemaphore


class SemaphoreConfig(BaseModel):
    """Open parameters for one named semaphore."""

    name: str
    """OS-level semaphore name (e.g., '/my_sem')."""

    create: bool = True
    """Create the semaphore if it does not exist."""

    exclusive: bool = False
    """Fail if the semaphore already exists (requires create)."""

    read: bool = True
    """Open for read."""

    write: bool = True
    """Open for write."""

    mode: int = 0o600
    """Permission bits used on creation. Accepts octal strings like '640'."""

    initial: int = 0
    """Initial count used on creation."""

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("name must not be empty")
        if "\0" in v:
            raise ValueError("name must not contain null bytes")
        return v

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, v: int | str) -> int:
        if isinstance(v, str):
            return parse_octal(v)
        return v

    @field_validator("mode")
    @classmethod
    def _validate_mode(cls, v: int) -> int:
        if v & ~int(AccessMode.from_octal(0o777)):
            raise ValueError(f"mode {v:#o} has bits outside user/group/other read/write")
        return v

    @field_validator("initial")
    @classmethod
    def _validate_initial(cls, v: int) -> int:
        if v < 0:
            raise ValueError("initial must be non-negative")
        return v

    @property
    def options(self) -> OpenOptions:
        """Open options described by this configuration."""
        options = OpenOptions.NONE
        if self.create:
            options |= OpenOptions.CREATE
        if self.exclusive:
            options |= OpenOptions.EXCLUSIVE
        if self.read:
            options |= OpenOptions.READ
        if self.write:
            options |= OpenOptions.WRITE
        return options

    @property
    def access_mode(self) -> AccessMode:
        """Access mode described by this configuration."""
        return AccessMode(self.mode)

    def open(self) -> NamedSemaphore:
        """Open the semaphore described by this configuration.

        Raises:
            SemaphoreOSError: If the OS rejects the open
        """
        from namedsem.backplane.semaphore import NamedSemaphore

        return NamedSemaphore.open(self.name, self.options, self.access_mode, self.initial)

    @classmethod
    def from_yaml(cls, path: Path | str) -> SemaphoreConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Parsed configuration

        Raises:
            FileNotFoundError: If file doesn't exist
            pydantic.ValidationError: If configuration invalid
        """
        import yaml

        path = Path(path)
        with path.open() as f:
            data = yaml.safe_load(f)

        return cls.model_validate(data)
