"""Enumerations and defaults for directory-manager."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CompareOptions(str, Enum):
    """Attribute used to decide whether two directories are the same."""

    DEFAULT = "default"
    NAME = "name"
    FULL_NAME = "full_name"
    DATE_OF_CREATION = "date_of_creation"
    SIZE = "size"


class OutputOptions(str, Enum):
    """Which side of a comparison is returned."""

    DEFAULT = "default"
    MATCHING = "matching"
    NON_MATCHING = "non_matching"


class RenameOptions(str, Enum):
    """Supported batch rename strategies."""

    DEFAULT = "default"
    ADD_INCREMENTAL_NUMBERS_TO_BEGINNING = "add_incremental_numbers_to_beginning"
    ADD_INCREMENTAL_NUMBERS_TO_END = "add_incremental_numbers_to_end"
    REPLACE_MATCHED_REGEX_PATTERN = "replace_matched_regex_pattern"
    REMOVE_MATCHED_REGEX_PATTERN = "remove_matched_regex_pattern"
    ADD_RANDOM_LETTERS_TO_END = "add_random_letters_to_end"
    GENERATE_RANDOM_NAME = "generate_random_name"
    USE_UNIQUE_NAME = "use_unique_name"


class SearchOptions(str, Enum):
    """How a search key is matched against child names."""

    DEFAULT = "default"
    NAME = "name"
    REGEX = "regex"


class ChangeType(str, Enum):
    """Kinds of change reported inside a watched directory."""

    CREATED = "created"
    DELETED = "deleted"
    CHANGED = "changed"
    RENAMED = "renamed"


class WatchState(str, Enum):
    """Lifecycle of a change-notification subscription."""

    DISABLED = "disabled"
    ENABLING = "enabling"
    ENABLED = "enabled"
    DISABLING = "disabling"


class OperatingSystem(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RenameDefaults:
    """Parameters used when a caller does not pick a rename strategy."""

    options: RenameOptions = RenameOptions.ADD_INCREMENTAL_NUMBERS_TO_BEGINNING
    separator: str = "-"
    start_from: int = 1
    random_letters: int = 4
    ignore_case: bool = True


RENAME_DEFAULTS = RenameDefaults()

# Characters that may never appear in a folder name.
RESERVED_NAME_CHARACTERS = '\\/:*?"<>|\x00'


__all__ = [
    "ChangeType",
    "CompareOptions",
    "OperatingSystem",
    "OutputOptions",
    "RENAME_DEFAULTS",
    "RESERVED_NAME_CHARACTERS",
    "RenameDefaults",
    "RenameOptions",
    "SearchOptions",
    "WatchState",
]
