"""directory-manager package exports."""

from .comparer import compare
from .config import ChangeType, CompareOptions, OutputOptions, RenameOptions, SearchOptions
from .exceptions import (
    DirectoryManagerError,
    DirectoryNotFoundError,
    InvalidArgumentError,
    InvalidFolderNameError,
    InvalidPatternError,
    RenameFailedError,
    UnknownPlatformError,
)
from .manager import DirectoryManager
from .models import ChangeEvent, DirectoryEntity
from .renamer import rename_all
from .search import search
from .watcher import ChangeNotifier

__all__ = [
    "ChangeEvent",
    "ChangeNotifier",
    "ChangeType",
    "CompareOptions",
    "DirectoryEntity",
    "DirectoryManager",
    "DirectoryManagerError",
    "DirectoryNotFoundError",
    "InvalidArgumentError",
    "InvalidFolderNameError",
    "InvalidPatternError",
    "OutputOptions",
    "RenameFailedError",
    "RenameOptions",
    "SearchOptions",
    "UnknownPlatformError",
    "compare",
    "rename_all",
    "search",
]
