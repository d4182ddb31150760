"""Exception classes for directory-manager.

Every failure is raised as a distinct subclass of
:class:`DirectoryManagerError` so callers can tell a bad generated name apart
from a vanished directory tree. Each class also derives from the closest
built-in exception so generic ``except OSError``/``except ValueError`` blocks
keep working.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class Messages:
    """User-facing error messages."""

    DIRECTORY_NULL = "provided directory is None"
    DIRECTORIES_NULL = "provided directories are None"
    DIRECTORY_NOT_EXIST = "the specified folder does not exist, provide a valid path"
    DIRECTORIES_MUST_HAVE_ONE_DIR = "the list of directories must contain exactly one directory"

    INVALID_NAME = "the given name is None or empty"
    INVALID_DEST_PATH = "the given destination path is invalid, it is None or empty"
    INVALID_SEPARATOR = (
        'Invalid separator, separator cannot be a letter, a digit, an underscore or any of '
        'the following characters: \\ / : * ? " < > |'
    )
    INVALID_FOLDER_NAME = 'A folder name cannot contain a null character or any of the following characters: \\ / : * ? " < > |'
    INVALID_REGEX_PATTERN = "the given regex pattern is None or empty"
    MALFORMED_REGEX_PATTERN = "the given regex pattern cannot be compiled"

    CANNOT_OPEN_FOLDER_VIEWER = "Unknown operating system, cannot open the folder viewer"
    CANNOT_RETURN_SPECIFIED_PATH = "Unknown operating system, cannot return the specified path"


class DirectoryManagerError(Exception):
    """Base exception for directory operations."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DirectoryNotFoundError(DirectoryManagerError, FileNotFoundError):
    """Raised when a required directory does not exist."""

    def __init__(
        self,
        message: str = Messages.DIRECTORY_NOT_EXIST,
        path: Optional[PathLike] = None,
    ):
        self.path = str(path) if path is not None else None
        full_message = message if path is None else f"{message}: {path}"
        super().__init__(full_message)


class InvalidArgumentError(DirectoryManagerError, ValueError):
    """Raised for None/empty keys, patterns, separators or a bad batch size."""

    def __init__(
        self,
        message: str = "Invalid argument",
        argument_name: Optional[str] = None,
    ):
        self.argument_name = argument_name
        super().__init__(message)


class InvalidPatternError(InvalidArgumentError):
    """Raised when a regular expression cannot be compiled."""

    def __init__(
        self,
        message: str = Messages.MALFORMED_REGEX_PATTERN,
        pattern: Optional[str] = None,
    ):
        self.pattern = pattern
        if pattern is not None:
            message = f"{message}: {pattern!r}"
        super().__init__(message, argument_name="pattern")


class InvalidFolderNameError(DirectoryManagerError, ValueError):
    """Raised when a supplied or generated folder name is not valid."""

    def __init__(
        self,
        message: str = Messages.INVALID_FOLDER_NAME,
        name: Optional[str] = None,
    ):
        self.name = name
        full_message = message if name is None else f"{message} (got {name!r})"
        super().__init__(full_message)


class RenameFailedError(DirectoryManagerError, OSError):
    """Raised when the OS rejects a rename, move or copy."""

    def __init__(
        self,
        message: str,
        source: Optional[PathLike] = None,
        destination: Optional[PathLike] = None,
        os_error: Optional[OSError] = None,
    ):
        self.source = str(source) if source is not None else None
        self.destination = str(destination) if destination is not None else None
        self.os_error = os_error
        super().__init__(message)


class UnknownPlatformError(DirectoryManagerError, RuntimeError):
    """Raised when the operating system cannot be identified."""


def format_rename_error(source: PathLike, destination: PathLike, error: OSError) -> RenameFailedError:
    """Create a :class:`RenameFailedError` describing a rejected rename."""

    reason = error.strerror or str(error)
    return RenameFailedError(
        f"Cannot rename '{source}' to '{destination}': {reason}",
        source=source,
        destination=destination,
        os_error=error,
    )


__all__ = [
    "DirectoryManagerError",
    "DirectoryNotFoundError",
    "InvalidArgumentError",
    "InvalidFolderNameError",
    "InvalidPatternError",
    "Messages",
    "RenameFailedError",
    "UnknownPlatformError",
    "format_rename_error",
]
