"""Core dataclasses shared across directory-manager modules."""
from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .config import (
    RENAME_DEFAULTS,
    ChangeType,
    CompareOptions,
    OutputOptions,
    RenameOptions,
)


def _normalize(path: str | Path) -> Path:
    return Path(os.path.abspath(os.fspath(Path(path).expanduser())))


@dataclass(slots=True, eq=False)
class DirectoryEntity:
    """A lightweight view over one directory path.

    Nothing is cached: every attribute is read from the filesystem when it is
    accessed, and :meth:`compute_total_size` walks the whole subtree on every
    call. Equality is left to
    :mod:`directory_manager.comparators`, which compares by a chosen key.
    """

    path: Path

    def __post_init__(self) -> None:
        self.path = _normalize(self.path)

    @classmethod
    def from_path(cls, path: str | Path) -> "DirectoryEntity":
        return cls(Path(path))

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def full_path(self) -> str:
        return str(self.path)

    @property
    def creation_time(self) -> float:
        """Creation timestamp, falling back to ``st_ctime`` where birth time is unavailable."""

        stat_result = self.path.stat()
        return getattr(stat_result, "st_birthtime", stat_result.st_ctime)

    def exists(self) -> bool:
        return self.path.is_dir()

    def parent(self) -> "DirectoryEntity":
        return DirectoryEntity(self.path.parent)

    def compute_total_size(self) -> int:
        """Return the recursive byte count of every file below this directory."""

        from .utils.fs import total_size

        return total_size(self.path)

    def __repr__(self) -> str:
        return f"DirectoryEntity({self.full_path!r})"


@dataclass(slots=True, frozen=True)
class ChangeEvent:
    """Normalized change notification for a watched directory.

    ``old_full_path`` and ``old_name`` are only populated for
    :attr:`ChangeType.RENAMED`.
    """

    change_type: ChangeType
    full_path: str
    name: str
    old_full_path: str | None = None
    old_name: str | None = None
    is_directory: bool = False
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, object]:
        return {
            "change_type": self.change_type.value,
            "full_path": self.full_path,
            "name": self.name,
            "old_full_path": self.old_full_path,
            "old_name": self.old_name,
            "is_directory": self.is_directory,
            "timestamp": self.timestamp,
        }


@dataclass(slots=True, frozen=True)
class ComparisonRequest:
    """One comparison between the immediate children of two roots."""

    left_root: Path
    right_root: Path
    output: OutputOptions = OutputOptions.MATCHING
    compare_by: CompareOptions = CompareOptions.NAME


@dataclass(slots=True)
class RenameBatch:
    """Ordered directories plus the strategy applied to all of them."""

    directories: Sequence[DirectoryEntity]
    options: RenameOptions = RenameOptions.DEFAULT
    separator: str = RENAME_DEFAULTS.separator
    start_from: int = RENAME_DEFAULTS.start_from
    pattern: str | None = ""
    replace_with: str = ""
    new_name: str | None = None
    ignore_case: bool = RENAME_DEFAULTS.ignore_case


__all__ = [
    "ChangeEvent",
    "ComparisonRequest",
    "DirectoryEntity",
    "RenameBatch",
]
