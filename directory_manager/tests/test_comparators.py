from __future__ import annotations

from directory_manager.comparators import (
    CreationTimeEquivalence,
    FullNameEquivalence,
    NameEquivalence,
    SizeEquivalence,
    get_policy,
)
from directory_manager.config import CompareOptions
from directory_manager.models import DirectoryEntity


def test_equal_entities_have_equal_hashes(make_tree) -> None:
    left = make_tree("A", ["same"], files={"same/f.txt": "abc"})
    right = make_tree("B", ["same"], files={"same/g.txt": "xyz"})
    first = DirectoryEntity(left / "same")
    second = DirectoryEntity(right / "same")

    for policy in (NameEquivalence(), SizeEquivalence()):
        assert policy.equals(first, second)
        assert policy.hash(first) == policy.hash(second)

    assert not FullNameEquivalence().equals(first, second)


def test_name_equivalence_is_case_sensitive(make_tree) -> None:
    root = make_tree("A", ["Docs", "docs"])

    assert not NameEquivalence().equals(DirectoryEntity(root / "Docs"), DirectoryEntity(root / "docs"))


def test_size_is_recomputed_after_changes(make_tree) -> None:
    root = make_tree("A", ["a"], files={"a/f.txt": "12"})
    entity = DirectoryEntity(root / "a")
    policy = SizeEquivalence()

    assert policy.key(entity) == 2
    (root / "a" / "more.txt").write_text("345", encoding="utf-8")
    assert policy.key(entity) == 5


def test_creation_time_is_the_same_for_the_same_path(make_tree) -> None:
    root = make_tree("A", ["a"])
    policy = CreationTimeEquivalence()

    assert policy.equals(DirectoryEntity(root / "a"), DirectoryEntity(str(root / "a")))


def test_get_policy_maps_default_to_name() -> None:
    assert isinstance(get_policy(CompareOptions.DEFAULT), NameEquivalence)
    assert isinstance(get_policy("size"), SizeEquivalence)
    assert isinstance(get_policy(CompareOptions.FULL_NAME), FullNameEquivalence)
    assert isinstance(get_policy(CompareOptions.DATE_OF_CREATION), CreationTimeEquivalence)
