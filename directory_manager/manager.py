"""High-level handle over one directory."""
from __future__ import annotations

import asyncio
import functools
import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from . import renamer
from .comparer import compare as compare_directories
from .config import (
    RENAME_DEFAULTS,
    ChangeType,
    CompareOptions,
    OutputOptions,
    RenameOptions,
    SearchOptions,
)
from .exceptions import DirectoryNotFoundError, InvalidArgumentError, Messages
from .logger import get_logger
from .models import ChangeEvent, DirectoryEntity
from .naming import validate_folder_name
from .search import search as search_directories
from .utils import fs, system
from .watcher import ChangeCallback, ChangeNotifier

LOGGER_NAME = "manager"

# Thread pool for the *_async wrappers
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="directory_manager")


async def _run_sync(func, *args, **kwargs):
    """Run a synchronous function in the thread pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, lambda: func(*args, **kwargs))


ManagedLike = Union["DirectoryManager", DirectoryEntity, str, Path]


def _to_entity(directory: ManagedLike) -> DirectoryEntity:
    if isinstance(directory, DirectoryManager):
        return directory.to_entity()
    if isinstance(directory, DirectoryEntity):
        return directory
    if directory is None:
        raise InvalidArgumentError(Messages.DIRECTORY_NULL, argument_name="directory")
    return DirectoryEntity.from_path(directory)


class DirectoryManager:
    """Managed handle over an existing directory.

    Wraps comparison, search, renaming and change notification for one path.
    The handle owns at most one change-notification subscription, released by
    :meth:`disable_change_notification`, :meth:`close`, leaving a ``with``
    block or garbage collection.
    """

    def __init__(
        self,
        path: str | Path,
        create_if_missing: bool = False,
        *,
        logger: Optional[logging.Logger] = None,
        notifier_factory: Optional[Callable[[Path], ChangeNotifier]] = None,
    ):
        if path is None or not str(path).strip():
            raise InvalidArgumentError(Messages.DIRECTORY_NULL, argument_name="path")
        target = Path(path).expanduser()
        if not fs.exists(target):
            if not create_if_missing:
                raise DirectoryNotFoundError(path=target)
            fs.ensure_directory(target)

        self._entity = DirectoryEntity(target)
        self.logger = get_logger(LOGGER_NAME, logger)
        self._notifier_factory = notifier_factory or functools.partial(ChangeNotifier, logger=self.logger)
        self._notifier: Optional[ChangeNotifier] = None

    # ------------------------------------------------------------------
    # Explicit conversions
    @classmethod
    def from_entity(cls, entity: DirectoryEntity, create_if_missing: bool = False) -> "DirectoryManager":
        return cls(entity.path, create_if_missing)

    def to_entity(self) -> DirectoryEntity:
        """Return the entity backing this handle; renames update it in place."""
        return self._entity

    # ------------------------------------------------------------------
    # Metadata
    @property
    def path(self) -> Path:
        return self._entity.path

    @property
    def name(self) -> str:
        return self._entity.name

    @property
    def full_path(self) -> str:
        return self._entity.full_path

    @property
    def exists(self) -> bool:
        return self._entity.exists()

    @property
    def parent(self) -> DirectoryEntity:
        return self._entity.parent()

    @property
    def root(self) -> DirectoryEntity:
        return DirectoryEntity(Path(self.path.anchor))

    @property
    def creation_time(self) -> datetime:
        return datetime.fromtimestamp(self._entity.creation_time)

    @property
    def last_write_time(self) -> datetime:
        return datetime.fromtimestamp(self.path.stat().st_mtime)

    @property
    def last_access_time(self) -> datetime:
        return datetime.fromtimestamp(self.path.stat().st_atime)

    @property
    def total_directories(self) -> int:
        return len(fs.list_subdirectories(self.path))

    @property
    def total_files(self) -> int:
        return len(fs.list_files(self.path))

    def compute_total_size(self) -> int:
        """Walk the whole subtree and return its size in bytes."""
        return self._entity.compute_total_size()

    async def compute_total_size_async(self) -> int:
        return await _run_sync(self.compute_total_size)

    # ------------------------------------------------------------------
    # Enumeration
    def directories(self, pattern: str = "*") -> list[DirectoryEntity]:
        return fs.list_subdirectories(self.path, pattern)

    def files(self, pattern: str = "*") -> list[Path]:
        return fs.list_files(self.path, pattern)

    def create_subdirectory(self, name: str) -> "DirectoryManager":
        validate_folder_name(name)
        return DirectoryManager(self.path / name, create_if_missing=True, logger=self.logger)

    def delete(self, recursive: bool = False) -> None:
        self.disable_change_notification()
        if recursive:
            shutil.rmtree(self.path)
        else:
            self.path.rmdir()

    # ------------------------------------------------------------------
    # Compare / search
    def compare(
        self,
        other: ManagedLike,
        output: OutputOptions | str = OutputOptions.MATCHING,
        compare_by: CompareOptions | str = CompareOptions.NAME,
    ) -> list[DirectoryEntity]:
        """Compare this directory's children with *other*'s.

        See :func:`directory_manager.comparer.compare`; the result is
        materialized into a list.
        """
        other_entity = _to_entity(other)
        return list(compare_directories(self.path, other_entity.path, output, compare_by, logger=self.logger))

    async def compare_async(
        self,
        other: ManagedLike,
        output: OutputOptions | str = OutputOptions.MATCHING,
        compare_by: CompareOptions | str = CompareOptions.NAME,
    ) -> list[DirectoryEntity]:
        return await _run_sync(self.compare, other, output, compare_by)

    def search(
        self,
        key: Optional[str],
        options: SearchOptions | str = SearchOptions.NAME,
    ) -> list[DirectoryEntity]:
        return list(search_directories(self.path, key, options, logger=self.logger))

    async def search_async(
        self,
        key: Optional[str],
        options: SearchOptions | str = SearchOptions.NAME,
    ) -> list[DirectoryEntity]:
        return await _run_sync(self.search, key, options)

    # ------------------------------------------------------------------
    # Rename / move / copy
    def rename(self, new_name: str) -> None:
        renamer.rename(self._entity, new_name, logger=self.logger)
        self._rearm_notifier()

    def generate_random_name(self) -> None:
        renamer.generate_random_name(self._entity, logger=self.logger)
        self._rearm_notifier()

    def move(self, destination_dir: str | Path) -> None:
        fs.move_directory(self._entity, destination_dir, logger=self.logger)
        self._rearm_notifier()

    def move_to_desktop(self) -> None:
        self.move(self.get_desktop_path())

    def copy(
        self,
        destination_dir: str | Path,
        copy_subdirs: bool = True,
        overwrite_files: bool = False,
    ) -> "DirectoryManager":
        target = fs.copy_directory(
            self.path,
            destination_dir,
            copy_subdirs=copy_subdirs,
            overwrite_files=overwrite_files,
            logger=self.logger,
        )
        return DirectoryManager(target, logger=self.logger)

    def copy_to_desktop(self, copy_subdirs: bool = True, overwrite_files: bool = False) -> "DirectoryManager":
        return self.copy(self.get_desktop_path(), copy_subdirs, overwrite_files)

    def launch_folder_view(self):
        return system.launch_folder_view(self.path)

    @staticmethod
    def get_desktop_path() -> Path:
        return system.get_desktop_path()

    # ------------------------------------------------------------------
    # Batch operations
    @staticmethod
    def rename_all(
        directories: Iterable[ManagedLike],
        options: RenameOptions | str = RenameOptions.DEFAULT,
        separator: str = RENAME_DEFAULTS.separator,
        pattern: Optional[str] = "",
        start_from: int = RENAME_DEFAULTS.start_from,
        replace_with: str = "",
        ignore_case: bool = RENAME_DEFAULTS.ignore_case,
        new_name: Optional[str] = None,
    ) -> None:
        """Apply a rename strategy; see :func:`directory_manager.renamer.rename_all`."""
        items = None if directories is None else list(directories)
        entities = None if items is None else [_to_entity(directory) for directory in items]
        try:
            renamer.rename_all(
                entities,
                options,
                separator=separator,
                pattern=pattern,
                start_from=start_from,
                replace_with=replace_with,
                new_name=new_name,
                ignore_case=ignore_case,
            )
        finally:
            for item in items or ():
                if isinstance(item, DirectoryManager):
                    item._rearm_notifier()

    @staticmethod
    async def rename_all_async(
        directories: Iterable[ManagedLike],
        options: RenameOptions | str = RenameOptions.DEFAULT,
        **kwargs,
    ) -> None:
        await _run_sync(DirectoryManager.rename_all, directories, options, **kwargs)

    @staticmethod
    def move_all(directories: Iterable[ManagedLike], destination_dir: str | Path) -> None:
        fs.ensure_directory(Path(destination_dir))
        for directory in directories:
            if isinstance(directory, DirectoryManager):
                directory.move(destination_dir)
            else:
                fs.move_directory(_to_entity(directory), destination_dir)

    @staticmethod
    def copy_all(
        directories: Iterable[ManagedLike],
        destination_dir: str | Path,
        copy_subdirs: bool = True,
        overwrite_files: bool = False,
    ) -> None:
        for directory in directories:
            fs.copy_directory(
                _to_entity(directory).path,
                destination_dir,
                copy_subdirs=copy_subdirs,
                overwrite_files=overwrite_files,
            )

    # ------------------------------------------------------------------
    # Change notification
    @property
    def change_notification_enabled(self) -> bool:
        return self._notifier is not None and self._notifier.enabled

    def _ensure_notifier(self) -> ChangeNotifier:
        if self._notifier is None:
            self._notifier = self._notifier_factory(self.path)
        return self._notifier

    def enable_change_notification(self) -> None:
        self._ensure_notifier().enable()

    def disable_change_notification(self) -> None:
        if self._notifier is not None:
            self._notifier.disable()

    def subscribe(
        self,
        callback: Callable[[ChangeEvent], None],
        change_types: Optional[Iterable[ChangeType]] = None,
    ) -> ChangeCallback:
        return self._ensure_notifier().subscribe(callback, change_types)

    def unsubscribe(self, callback: Callable[[ChangeEvent], None]) -> bool:
        if self._notifier is None:
            return False
        return self._notifier.unsubscribe(callback)

    def _rearm_notifier(self) -> None:
        """Point an existing notifier at the handle's current path."""
        notifier = self._notifier
        if notifier is None or notifier.path == self.path:
            return
        was_enabled = notifier.enabled
        notifier.disable()
        replacement = self._notifier_factory(self.path)
        for callback, kinds in notifier.subscriptions():
            replacement.subscribe(callback, kinds)
        self._notifier = replacement
        if was_enabled:
            replacement.enable()

    def close(self) -> None:
        self.disable_change_notification()

    def __enter__(self) -> "DirectoryManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self) -> None:
        notifier = getattr(self, "_notifier", None)
        if notifier is None:
            return
        try:
            notifier.disable()
        except Exception:  # pragma: no cover - interpreter shutdown
            pass

    def __repr__(self) -> str:
        return f"DirectoryManager({self.full_path!r})"


__all__ = ["DirectoryManager"]
