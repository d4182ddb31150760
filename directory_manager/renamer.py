"""Batch rename strategies for collections of directories.

Every strategy walks the directories in order and commits each rename
immediately. There is no rollback: when element *k* fails validation or the OS
rejects it, the error propagates at once, elements before *k* stay renamed and
elements after *k* are left untouched. The only silent case is a regex
strategy producing an unchanged name, which skips that element.
"""
from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Iterable, Union

from .config import RENAME_DEFAULTS, RenameOptions
from .exceptions import (
    DirectoryManagerError,
    InvalidArgumentError,
    InvalidPatternError,
    Messages,
)
from .logger import get_logger, log_event
from .models import DirectoryEntity, RenameBatch
from .naming import (
    is_blank,
    random_folder_name,
    random_letters,
    validate_folder_name,
    validate_separator,
)
from .utils.fs import rename_in_place

LOGGER_NAME = "renamer"

DirectoryLike = Union[DirectoryEntity, str, Path]


def _as_entities(directories: Iterable[DirectoryLike] | None) -> list[DirectoryEntity]:
    if directories is None:
        raise InvalidArgumentError(Messages.DIRECTORIES_NULL, argument_name="directories")
    entities: list[DirectoryEntity] = []
    for directory in directories:
        if directory is None:
            raise InvalidArgumentError(Messages.DIRECTORY_NULL, argument_name="directories")
        entities.append(directory if isinstance(directory, DirectoryEntity) else DirectoryEntity(Path(directory)))
    return entities


def _compile(pattern: str | None, ignore_case: bool) -> re.Pattern[str]:
    if is_blank(pattern):
        raise InvalidArgumentError(Messages.INVALID_REGEX_PATTERN, argument_name="pattern")
    try:
        return re.compile(pattern, re.IGNORECASE if ignore_case else 0)
    except re.error as exc:
        raise InvalidPatternError(pattern=pattern) from exc


def rename(
    directory: DirectoryLike,
    new_name: str | None,
    *,
    logger: logging.Logger | None = None,
) -> DirectoryEntity:
    """Rename one directory inside its parent and return the refreshed entity."""

    logger = get_logger(LOGGER_NAME, logger)
    (entity,) = _as_entities([directory])
    try:
        validate_folder_name(new_name)
    except DirectoryManagerError as exc:
        log_event(
            logger,
            level=logging.WARNING,
            action="rename.invalid",
            message=f"Rejected name for {entity.full_path}",
            extra={"path": entity.full_path, "name": new_name, "error": exc.message},
        )
        raise

    old_path = entity.full_path
    rename_in_place(entity, new_name, logger=logger)
    log_event(
        logger,
        level=logging.INFO,
        action="rename.commit",
        message=f"Renamed {old_path} -> {entity.full_path}",
        extra={"source": old_path, "destination": entity.full_path},
    )
    return entity


def generate_random_name(directory: DirectoryLike, *, logger: logging.Logger | None = None) -> DirectoryEntity:
    return rename(directory, random_folder_name(), logger=logger)


def rename_by_using_unique_name(
    directories: Iterable[DirectoryLike] | None,
    new_name: str | None,
    *,
    logger: logging.Logger | None = None,
) -> None:
    """Rename the single directory of *directories* to exactly *new_name*."""

    entities = _as_entities(directories)
    if len(entities) != 1:
        raise InvalidArgumentError(Messages.DIRECTORIES_MUST_HAVE_ONE_DIR, argument_name="directories")
    rename(entities[0], new_name, logger=logger)


def rename_by_adding_incremental_numbers_to_beginning(
    directories: Iterable[DirectoryLike] | None,
    separator: str = RENAME_DEFAULTS.separator,
    start_from: int = RENAME_DEFAULTS.start_from,
    *,
    logger: logging.Logger | None = None,
) -> None:
    separator = validate_separator(separator)
    for counter, entity in enumerate(_as_entities(directories), start=start_from):
        rename(entity, f"{counter}{separator}{entity.name}", logger=logger)


def rename_by_adding_incremental_numbers_to_end(
    directories: Iterable[DirectoryLike] | None,
    separator: str = RENAME_DEFAULTS.separator,
    start_from: int = RENAME_DEFAULTS.start_from,
    *,
    logger: logging.Logger | None = None,
) -> None:
    separator = validate_separator(separator)
    for counter, entity in enumerate(_as_entities(directories), start=start_from):
        rename(entity, f"{entity.name}{separator}{counter}", logger=logger)


def rename_by_adding_random_letters_to_end(
    directories: Iterable[DirectoryLike] | None,
    separator: str = RENAME_DEFAULTS.separator,
    *,
    logger: logging.Logger | None = None,
) -> None:
    separator = validate_separator(separator)
    for entity in _as_entities(directories):
        rename(entity, f"{entity.name}{separator}{random_letters()}", logger=logger)


def rename_by_generating_random_names(
    directories: Iterable[DirectoryLike] | None,
    *,
    logger: logging.Logger | None = None,
) -> None:
    for entity in _as_entities(directories):
        generate_random_name(entity, logger=logger)


def _rename_with_regex(
    directories: Iterable[DirectoryLike] | None,
    compiled: re.Pattern[str],
    replacement: str,
    logger: logging.Logger | None,
) -> None:
    logger = get_logger(LOGGER_NAME, logger)
    for entity in _as_entities(directories):
        new_name = compiled.sub(replacement, entity.name)
        if new_name == entity.name:
            log_event(
                logger,
                level=logging.DEBUG,
                action="rename.skip",
                message=f"Name unchanged for {entity.full_path}",
                extra={"path": entity.full_path, "pattern": compiled.pattern},
            )
            continue
        rename(entity, new_name, logger=logger)


def rename_by_removing_matched_regex_pattern(
    directories: Iterable[DirectoryLike] | None,
    pattern: str | None,
    ignore_case: bool = RENAME_DEFAULTS.ignore_case,
    *,
    logger: logging.Logger | None = None,
) -> None:
    """Strip every match of *pattern* from each name."""

    compiled = _compile(pattern, ignore_case)
    _rename_with_regex(directories, compiled, "", logger)


def rename_by_replacing_matched_regex_pattern(
    directories: Iterable[DirectoryLike] | None,
    pattern: str | None,
    replace_with: str = "",
    ignore_case: bool = RENAME_DEFAULTS.ignore_case,
    *,
    logger: logging.Logger | None = None,
) -> None:
    """Substitute every match of *pattern* with *replace_with*.

    *replace_with* follows :func:`re.sub` syntax, so ``\\1`` refers to a group.
    """

    compiled = _compile(pattern, ignore_case)
    try:
        compiled.sub(replace_with or "", "")
    except (re.error, IndexError) as exc:
        raise InvalidArgumentError(f"Invalid replacement: {exc}", argument_name="replace_with") from exc
    _rename_with_regex(directories, compiled, replace_with or "", logger)


def rename_all(
    directories: Iterable[DirectoryLike] | None,
    options: RenameOptions | str = RenameOptions.DEFAULT,
    *,
    separator: str = RENAME_DEFAULTS.separator,
    pattern: str | None = "",
    start_from: int = RENAME_DEFAULTS.start_from,
    replace_with: str = "",
    new_name: str | None = None,
    ignore_case: bool = RENAME_DEFAULTS.ignore_case,
    logger: logging.Logger | None = None,
) -> None:
    """Apply one :class:`RenameOptions` strategy to every directory in order.

    ``DEFAULT`` always means incremental numbers at the beginning with ``-``
    starting at 1, whatever *separator* and *start_from* say.
    ``USE_UNIQUE_NAME`` uses *new_name*, falling back to *replace_with*.
    """

    logger = get_logger(LOGGER_NAME, logger)
    options = RenameOptions(options)
    started = time.perf_counter()

    if options is RenameOptions.USE_UNIQUE_NAME:
        target = new_name if new_name is not None else replace_with
        rename_by_using_unique_name(directories, target, logger=logger)
    elif options is RenameOptions.GENERATE_RANDOM_NAME:
        rename_by_generating_random_names(directories, logger=logger)
    elif options is RenameOptions.ADD_RANDOM_LETTERS_TO_END:
        rename_by_adding_random_letters_to_end(directories, separator, logger=logger)
    elif options is RenameOptions.REMOVE_MATCHED_REGEX_PATTERN:
        rename_by_removing_matched_regex_pattern(directories, pattern, ignore_case, logger=logger)
    elif options is RenameOptions.REPLACE_MATCHED_REGEX_PATTERN:
        rename_by_replacing_matched_regex_pattern(
            directories, pattern, replace_with, ignore_case, logger=logger
        )
    elif options is RenameOptions.ADD_INCREMENTAL_NUMBERS_TO_END:
        rename_by_adding_incremental_numbers_to_end(directories, separator, start_from, logger=logger)
    elif options is RenameOptions.ADD_INCREMENTAL_NUMBERS_TO_BEGINNING:
        rename_by_adding_incremental_numbers_to_beginning(
            directories, separator, start_from, logger=logger
        )
    else:
        rename_by_adding_incremental_numbers_to_beginning(
            directories,
            RENAME_DEFAULTS.separator,
            RENAME_DEFAULTS.start_from,
            logger=logger,
        )

    log_event(
        logger,
        level=logging.INFO,
        action="rename.batch",
        message=f"Applied {options.value}",
        duration_ms=(time.perf_counter() - started) * 1000,
        extra={"options": options.value},
    )


def apply_batch(batch: RenameBatch, *, logger: logging.Logger | None = None) -> None:
    """Run :func:`rename_all` with the parameters stored in *batch*."""

    rename_all(
        batch.directories,
        batch.options,
        separator=batch.separator,
        pattern=batch.pattern,
        start_from=batch.start_from,
        replace_with=batch.replace_with,
        new_name=batch.new_name,
        ignore_case=batch.ignore_case,
        logger=logger,
    )


__all__ = [
    "apply_batch",
    "generate_random_name",
    "rename",
    "rename_all",
    "rename_by_adding_incremental_numbers_to_beginning",
    "rename_by_adding_incremental_numbers_to_end",
    "rename_by_adding_random_letters_to_end",
    "rename_by_generating_random_names",
    "rename_by_removing_matched_regex_pattern",
    "rename_by_replacing_matched_regex_pattern",
    "rename_by_using_unique_name",
]
