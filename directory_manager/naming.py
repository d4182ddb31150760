"""Folder-name validation and random name generation."""
from __future__ import annotations

import random
import re
import string

from .config import RENAME_DEFAULTS, RESERVED_NAME_CHARACTERS
from .exceptions import InvalidArgumentError, InvalidFolderNameError, Messages

_RESERVED_PATTERN = re.compile(f"[{re.escape(RESERVED_NAME_CHARACTERS)}]")
_INVALID_SEPARATOR_PATTERN = re.compile(rf"\w|[{re.escape(RESERVED_NAME_CHARACTERS)}]")
_RANDOM_NAME_ALPHABET = string.ascii_lowercase + string.digits


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def is_valid_folder_name(name: str) -> bool:
    """Return ``False`` if *name* contains NUL or any of ``\\ / : * ? " < > |``."""

    return _RESERVED_PATTERN.search(name) is None


def is_valid_separator(separator: str) -> bool:
    """Return ``False`` for word characters or reserved folder-name characters.

    The empty string is a valid separator and means "no separator".
    """

    return _INVALID_SEPARATOR_PATTERN.search(separator) is None


def validate_folder_name(name: str | None) -> str:
    if is_blank(name):
        raise InvalidArgumentError(Messages.INVALID_NAME, argument_name="name")
    if not is_valid_folder_name(name):
        raise InvalidFolderNameError(name=name)
    return name


def validate_separator(separator: str | None) -> str:
    separator = separator or ""
    if not is_valid_separator(separator):
        raise InvalidArgumentError(Messages.INVALID_SEPARATOR, argument_name="separator")
    return separator


def random_letters(size: int = RENAME_DEFAULTS.random_letters, uppercase: bool = True) -> str:
    letters = string.ascii_uppercase if uppercase else string.ascii_lowercase
    return "".join(random.choice(letters) for _ in range(size))


def random_folder_name() -> str:
    """Return a random ``xxxxxxxx.xxx`` token of lowercase letters and digits."""

    stem = "".join(random.choice(_RANDOM_NAME_ALPHABET) for _ in range(8))
    extension = "".join(random.choice(_RANDOM_NAME_ALPHABET) for _ in range(3))
    return f"{stem}.{extension}"


__all__ = [
    "is_blank",
    "is_valid_folder_name",
    "is_valid_separator",
    "random_folder_name",
    "random_letters",
    "validate_folder_name",
    "validate_separator",
]
