"""Equality strategies used to compare directories."""
from __future__ import annotations

from typing import Hashable

from .config import CompareOptions
from .models import DirectoryEntity


class EquivalencePolicy:
    """Equality and hashing derived from a single projection of a directory.

    Two entities are equal when :meth:`key` returns equal values for both, so
    the equality/hash contract holds by construction.
    """

    option: CompareOptions = CompareOptions.DEFAULT

    def key(self, entity: DirectoryEntity) -> Hashable:  # pragma: no cover - abstract
        raise NotImplementedError

    def equals(self, left: DirectoryEntity, right: DirectoryEntity) -> bool:
        return self.key(left) == self.key(right)

    def hash(self, entity: DirectoryEntity) -> int:
        return hash(self.key(entity))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NameEquivalence(EquivalencePolicy):
    """Case-sensitive comparison of leaf names."""

    option = CompareOptions.NAME

    def key(self, entity: DirectoryEntity) -> str:
        return entity.name


class FullNameEquivalence(EquivalencePolicy):
    """Case-sensitive comparison of absolute paths."""

    option = CompareOptions.FULL_NAME

    def key(self, entity: DirectoryEntity) -> str:
        return entity.full_path


class CreationTimeEquivalence(EquivalencePolicy):
    """Exact creation timestamp equality, without any tolerance window."""

    option = CompareOptions.DATE_OF_CREATION

    def key(self, entity: DirectoryEntity) -> float:
        return entity.creation_time


class SizeEquivalence(EquivalencePolicy):
    """Exact recursive byte count equality.

    The size is recomputed on every call, so comparing by size walks both
    subtrees each time it is used.
    """

    option = CompareOptions.SIZE

    def key(self, entity: DirectoryEntity) -> int:
        return entity.compute_total_size()


_POLICIES: dict[CompareOptions, type[EquivalencePolicy]] = {
    CompareOptions.DEFAULT: NameEquivalence,
    CompareOptions.NAME: NameEquivalence,
    CompareOptions.FULL_NAME: FullNameEquivalence,
    CompareOptions.DATE_OF_CREATION: CreationTimeEquivalence,
    CompareOptions.SIZE: SizeEquivalence,
}


def get_policy(option: CompareOptions | str = CompareOptions.NAME) -> EquivalencePolicy:
    """Return the :class:`EquivalencePolicy` for *option*."""

    return _POLICIES[CompareOptions(option)]()


__all__ = [
    "CreationTimeEquivalence",
    "EquivalencePolicy",
    "FullNameEquivalence",
    "NameEquivalence",
    "SizeEquivalence",
    "get_policy",
]
