"""Name and pattern search over the immediate subdirectories of a root."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from .config import SearchOptions
from .exceptions import InvalidPatternError
from .logger import get_logger, log_event
from .models import DirectoryEntity
from .utils.fs import iter_subdirectories, require_directory

LOGGER_NAME = "search"


def search_by_name(root: str | Path, key: str | None) -> Iterator[DirectoryEntity]:
    """Yield children whose name contains *key*, ignoring case.

    ``None`` is treated as the empty string and therefore matches every child.
    """

    path = require_directory(root)
    needle = (key or "").casefold()
    return (child for child in iter_subdirectories(path) if needle in child.name.casefold())


def search_by_regex(root: str | Path, pattern: str | None) -> Iterator[DirectoryEntity]:
    """Yield children whose name matches *pattern* anywhere, ignoring case.

    A malformed pattern raises :class:`InvalidPatternError` before the root is
    enumerated.
    """

    path = require_directory(root)
    try:
        compiled = re.compile(pattern or "", re.IGNORECASE)
    except re.error as exc:
        raise InvalidPatternError(pattern=pattern) from exc
    return (child for child in iter_subdirectories(path) if compiled.search(child.name))


def search(
    root: str | Path,
    key: str | None,
    options: SearchOptions | str = SearchOptions.NAME,
    *,
    logger: logging.Logger | None = None,
) -> Iterator[DirectoryEntity]:
    """Dispatch to :func:`search_by_name` or :func:`search_by_regex`."""

    logger = get_logger(LOGGER_NAME, logger)
    options = SearchOptions(options)
    log_event(
        logger,
        level=logging.DEBUG,
        action="search.start",
        message=f"Searching {root}",
        extra={"path": str(root), "key": key, "mode": options.value},
    )
    if options is SearchOptions.REGEX:
        return search_by_regex(root, key)
    return search_by_name(root, key)


__all__ = ["search", "search_by_name", "search_by_regex"]
