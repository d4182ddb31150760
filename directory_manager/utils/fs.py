"""Filesystem helpers used by directory-manager."""
from __future__ import annotations

import fnmatch
import logging
import os
import shutil
from pathlib import Path
from typing import Iterator

from ..exceptions import (
    DirectoryNotFoundError,
    InvalidArgumentError,
    Messages,
    RenameFailedError,
    format_rename_error,
)
from ..logger import get_logger, log_event
from ..models import DirectoryEntity

LOGGER_NAME = "fs"


def ensure_directory(path: Path) -> Path:
    """Ensure that *path* exists as a directory and return it."""

    path.mkdir(parents=True, exist_ok=True)
    return path


def exists(path: str | Path) -> bool:
    """Return ``True`` when *path* is an existing directory."""

    return Path(path).is_dir()


def require_directory(path: str | Path) -> Path:
    """Return *path* as a :class:`Path`, raising if it is not a directory."""

    candidate = Path(path)
    if not candidate.is_dir():
        raise DirectoryNotFoundError(path=candidate)
    return candidate


def iter_subdirectories(path: str | Path, pattern: str = "*") -> Iterator[DirectoryEntity]:
    """Yield the immediate subdirectories of *path* sorted by name.

    Symlinks to directories are not followed. The listing is taken when the
    generator is first advanced.
    """

    root = Path(path)
    with os.scandir(root) as it:
        entries = sorted(
            (entry for entry in it if entry.is_dir(follow_symlinks=False)),
            key=lambda entry: entry.name,
        )
    for entry in entries:
        if pattern == "*" or fnmatch.fnmatch(entry.name, pattern):
            yield DirectoryEntity(Path(entry.path))


def list_subdirectories(path: str | Path, pattern: str = "*") -> list[DirectoryEntity]:
    return list(iter_subdirectories(path, pattern))


def list_files(path: str | Path, pattern: str = "*") -> list[Path]:
    """Return the immediate regular files of *path* sorted by name."""

    with os.scandir(path) as it:
        names = sorted(
            entry.name
            for entry in it
            if entry.is_file(follow_symlinks=False)
            and (pattern == "*" or fnmatch.fnmatch(entry.name, pattern))
        )
    return [Path(path) / name for name in names]


def total_size(path: str | Path) -> int:
    """Return the size in bytes of all files below *path*, recomputed every call."""

    root = require_directory(path)
    size = 0
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        with os.scandir(current) as it:
            for entry in it:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(Path(entry.path))
                elif entry.is_file(follow_symlinks=False):
                    size += entry.stat(follow_symlinks=False).st_size
    return size


def _same_entry(first: Path, second: Path) -> bool:
    try:
        return os.path.samefile(first, second)
    except OSError:
        return False


def rename_in_place(
    entity: DirectoryEntity,
    new_name: str,
    *,
    logger: logging.Logger | None = None,
) -> DirectoryEntity:
    """Rename *entity* inside its parent and refresh ``entity.path``.

    An existing destination is never overwritten. Raises
    :class:`RenameFailedError` when the OS rejects the rename.
    """

    logger = get_logger(LOGGER_NAME, logger)
    source = entity.path
    if not source.is_dir():
        raise DirectoryNotFoundError(path=source)

    destination = source.parent / new_name
    if destination == source:
        return entity
    if destination.exists() and not _same_entry(source, destination):
        raise format_rename_error(source, destination, FileExistsError(17, "Destination already exists"))

    try:
        os.rename(source, destination)
    except OSError as exc:
        log_event(
            logger,
            level=logging.ERROR,
            action="rename.failed",
            message=f"Cannot rename {source}",
            extra={"source": str(source), "destination": str(destination), "error": repr(exc)},
        )
        raise format_rename_error(source, destination, exc) from exc

    entity.path = destination
    return entity


def move_directory(
    entity: DirectoryEntity,
    destination_dir: str | Path,
    *,
    logger: logging.Logger | None = None,
) -> DirectoryEntity:
    """Move *entity* into *destination_dir*, keeping its name.

    Moves are plain renames; crossing volumes is reported as a
    :class:`RenameFailedError`.
    """

    logger = get_logger(LOGGER_NAME, logger)
    if destination_dir is None or not str(destination_dir).strip():
        raise InvalidArgumentError(Messages.INVALID_DEST_PATH, argument_name="destination_dir")

    source = entity.path
    if not source.is_dir():
        raise DirectoryNotFoundError(path=source)
    target = Path(destination_dir) / source.name
    if target.exists():
        raise format_rename_error(source, target, FileExistsError(17, "Destination already exists"))

    try:
        os.rename(source, target)
    except OSError as exc:
        raise format_rename_error(source, target, exc) from exc

    entity.path = DirectoryEntity(target).path
    log_event(
        logger,
        level=logging.INFO,
        action="move.commit",
        message=f"Moved {source} -> {entity.path}",
        extra={"source": str(source), "destination": str(entity.path)},
    )
    return entity


def copy_directory(
    source: str | Path,
    destination_dir: str | Path,
    *,
    copy_subdirs: bool = True,
    overwrite_files: bool = False,
    logger: logging.Logger | None = None,
) -> Path:
    """Copy *source* into ``destination_dir/<source name>`` and return the copy.

    Existing files are only replaced when *overwrite_files* is set; otherwise
    the first collision raises :class:`RenameFailedError`.
    """

    logger = get_logger(LOGGER_NAME, logger)
    if destination_dir is None or not str(destination_dir).strip():
        raise InvalidArgumentError(Messages.INVALID_DEST_PATH, argument_name="destination_dir")

    source_path = require_directory(source)
    target = ensure_directory(Path(destination_dir) / source_path.name)
    bytes_copied = 0

    for file_path in list_files(source_path):
        file_target = target / file_path.name
        if file_target.exists() and not overwrite_files:
            raise format_rename_error(file_path, file_target, FileExistsError(17, "File already exists"))
        try:
            shutil.copy2(file_path, file_target)
        except OSError as exc:
            raise format_rename_error(file_path, file_target, exc) from exc
        bytes_copied += file_path.stat().st_size

    if copy_subdirs:
        for child in iter_subdirectories(source_path):
            copy_directory(
                child.path,
                target,
                copy_subdirs=True,
                overwrite_files=overwrite_files,
                logger=logger,
            )

    log_event(
        logger,
        level=logging.DEBUG,
        action="copy.commit",
        message=f"Copied {source_path} -> {target}",
        extra={"source": str(source_path), "destination": str(target), "bytes": bytes_copied},
    )
    return target


__all__ = [
    "copy_directory",
    "ensure_directory",
    "exists",
    "iter_subdirectories",
    "list_files",
    "list_subdirectories",
    "move_directory",
    "rename_in_place",
    "require_directory",
    "total_size",
]
