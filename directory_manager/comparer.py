"""Set comparison of the immediate subdirectories of two roots."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from .comparators import EquivalencePolicy, get_policy
from .config import CompareOptions, OutputOptions
from .exceptions import DirectoryNotFoundError
from .logger import get_logger, log_event
from .models import ComparisonRequest, DirectoryEntity
from .utils.fs import exists, iter_subdirectories

LOGGER_NAME = "comparer"


def compare(
    left_root: str | Path,
    right_root: str | Path,
    output: OutputOptions | str = OutputOptions.MATCHING,
    compare_by: CompareOptions | str = CompareOptions.NAME,
    *,
    logger: logging.Logger | None = None,
) -> Iterator[DirectoryEntity]:
    """Compare the immediate subdirectories of *left_root* and *right_root*.

    ``MATCHING`` yields the left children that have an equivalent child on the
    right. ``NON_MATCHING`` yields the left children that have none; it is
    left-except-right, not a symmetric difference. Files are ignored.

    Both roots are checked before anything is enumerated and a missing root
    raises :class:`DirectoryNotFoundError`. The returned iterator is lazy and
    offers no isolation from concurrent changes to either tree.
    """

    request = ComparisonRequest(
        left_root=Path(left_root),
        right_root=Path(right_root),
        output=OutputOptions(output),
        compare_by=CompareOptions(compare_by),
    )
    return compare_request(request, logger=logger)


def compare_request(
    request: ComparisonRequest,
    *,
    logger: logging.Logger | None = None,
) -> Iterator[DirectoryEntity]:
    """Run a prebuilt :class:`ComparisonRequest`. See :func:`compare`."""

    logger = get_logger(LOGGER_NAME, logger)
    for root in (request.left_root, request.right_root):
        if not exists(root):
            log_event(
                logger,
                level=logging.WARNING,
                action="compare.missing_root",
                message=f"Root does not exist: {root}",
                extra={"path": str(root)},
            )
            raise DirectoryNotFoundError(path=root)

    policy = get_policy(request.compare_by)
    keep_matching = request.output is not OutputOptions.NON_MATCHING

    log_event(
        logger,
        level=logging.DEBUG,
        action="compare.start",
        message=f"Comparing {request.left_root} with {request.right_root}",
        extra={
            "left": str(request.left_root),
            "right": str(request.right_root),
            "output": request.output.value,
            "compare_by": request.compare_by.value,
        },
    )
    return _filter_children(request.left_root, request.right_root, policy, keep_matching)


def _filter_children(
    left_root: Path,
    right_root: Path,
    policy: EquivalencePolicy,
    keep_matching: bool,
) -> Iterator[DirectoryEntity]:
    right_keys = {policy.key(child) for child in iter_subdirectories(right_root)}
    for child in iter_subdirectories(left_root):
        if (policy.key(child) in right_keys) == keep_matching:
            yield child


__all__ = ["compare", "compare_request"]
