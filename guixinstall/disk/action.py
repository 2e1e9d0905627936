"""Units of work performed during the disk phases of an installation."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from guixinstall.commands import run_cmd

_CHUNK = 1024 * 1024


class Action(ABC):
    """A single step of a disk-related installation phase."""

    @abstractmethod
    def execute(self) -> None:
        """Perform the action, raising on failure."""


@dataclass(frozen=True)
class Cmd(Action):
    """Run an external program with the given arguments."""

    args: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(str(a) for a in self.args))

    @classmethod
    def of(cls, *args: str) -> Cmd:
        """Build a command from its program name and arguments."""
        return cls(tuple(args))

    def execute(self) -> None:
        run_cmd(self.args)


@dataclass(frozen=True)
class Mkdir(Action):
    """Create a directory and any missing parents."""

    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    def execute(self) -> None:
        self.path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class CreateSwapFile(Action):
    """Create a fully allocated, zero-filled file readable only by its owner.

    The file is written out rather than made sparse, since mkswap rejects
    swap files with holes.
    """

    path: Path
    size_bytes: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    def execute(self) -> None:
        fd = os.open(self.path, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, 0o600)
        with os.fdopen(fd, "wb") as file:
            zeros = bytes(_CHUNK)
            remaining = self.size_bytes
            while remaining > 0:
                n = min(remaining, _CHUNK)
                file.write(zeros[:n])
                remaining -= n
            file.flush()
            os.fsync(file.fileno())


@dataclass(frozen=True)
class SetPermissions(Action):
    """Set the permission bits of a file."""

    path: Path
    mode: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    def execute(self) -> None:
        os.chmod(self.path, self.mode)


@dataclass(frozen=True)
class Mount(Action):
    """Mount a filesystem of type ``fstype`` from ``source`` on ``target``."""

    source: Path
    target: Path
    fstype: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", Path(self.source))
        object.__setattr__(self, "target", Path(self.target))

    def execute(self) -> None:
        run_cmd(["mount", "-t", self.fstype, str(self.source), str(self.target)])