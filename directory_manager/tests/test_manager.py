"""Tests for :class:`directory_manager.manager.DirectoryManager`."""
from __future__ import annotations

import weakref
from pathlib import Path

import pytest

from directory_manager.config import ChangeType, CompareOptions, OutputOptions, RenameOptions, SearchOptions
from directory_manager.exceptions import DirectoryNotFoundError, InvalidArgumentError, InvalidFolderNameError
from directory_manager.manager import DirectoryManager
from directory_manager.models import ChangeEvent, DirectoryEntity
from directory_manager.watcher import ChangeNotifier


class NullBackend:
    def __init__(self, notifier: ChangeNotifier) -> None:
        self.notifier = notifier

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass


def fake_notifiers(created: list[ChangeNotifier]):
    def factory(path: Path) -> ChangeNotifier:
        notifier = ChangeNotifier(path, backend_factory=NullBackend)
        created.append(notifier)
        return notifier

    return factory


def test_missing_directory_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(DirectoryNotFoundError):
        DirectoryManager(tmp_path / "missing")
    with pytest.raises(InvalidArgumentError):
        DirectoryManager("  ")


def test_create_if_missing(tmp_path: Path) -> None:
    manager = DirectoryManager(tmp_path / "new" / "nested", create_if_missing=True)

    assert manager.exists
    assert manager.name == "nested"
    assert manager.parent.full_path == str(tmp_path / "new")


def test_metadata_and_enumeration(make_tree) -> None:
    root = make_tree("root", ["b", "a"], files={"one.txt": "123", "a/two.txt": "45"})
    manager = DirectoryManager(root)

    assert [entity.name for entity in manager.directories()] == ["a", "b"]
    assert [path.name for path in manager.files("*.txt")] == ["one.txt"]
    assert manager.total_directories == 2
    assert manager.total_files == 1
    assert manager.compute_total_size() == 5
    assert manager.root.full_path == root.anchor
    assert manager.last_write_time is not None
    assert manager.creation_time is not None


def test_explicit_conversions(make_tree) -> None:
    root = make_tree("root", [])
    manager = DirectoryManager(root)

    entity = manager.to_entity()
    again = DirectoryManager.from_entity(entity)

    assert isinstance(entity, DirectoryEntity)
    assert again.full_path == manager.full_path


def test_compare_and_search(make_tree) -> None:
    left = DirectoryManager(make_tree("A", ["a", "b", "c"]))
    right = DirectoryManager(make_tree("B", ["b", "c", "d"]))

    matching = left.compare(right, OutputOptions.MATCHING, CompareOptions.NAME)
    missing = left.compare(right.path, OutputOptions.NON_MATCHING)

    assert [entity.name for entity in matching] == ["b", "c"]
    assert [entity.name for entity in missing] == ["a"]
    assert [entity.name for entity in left.search("B")] == ["b"]
    assert [entity.name for entity in left.search("^[ab]$", SearchOptions.REGEX)] == ["a", "b"]


def test_rename_updates_handle(make_tree) -> None:
    root = make_tree("root", ["old"])
    manager = DirectoryManager(root / "old")

    manager.rename("new")

    assert manager.path == root / "new"
    assert (root / "new").is_dir()
    with pytest.raises(InvalidFolderNameError):
        manager.rename("bad|name")


def test_create_subdirectory_validates_name(make_tree) -> None:
    manager = DirectoryManager(make_tree("root", []))

    child = manager.create_subdirectory("child")

    assert child.exists
    with pytest.raises(InvalidFolderNameError):
        manager.create_subdirectory("a:b")


def test_move_copy_and_delete(make_tree, tmp_path: Path) -> None:
    root = make_tree("root", ["src"], files={"src/f.txt": "data", "src/sub/g.txt": "x"})
    destination = tmp_path / "dest"
    destination.mkdir()
    manager = DirectoryManager(root / "src")

    shallow = manager.copy(tmp_path / "shallow", copy_subdirs=False)
    manager.move(destination)

    assert manager.path == destination / "src"
    assert not (root / "src").exists()
    assert (shallow.path / "f.txt").read_text(encoding="utf-8") == "data"
    assert not (shallow.path / "sub").exists()

    shallow.delete(recursive=True)
    assert not shallow.path.exists()


def test_rename_all_accepts_managers(make_tree) -> None:
    root = make_tree("root", ["x", "y"])
    managers = [DirectoryManager(root / "x"), DirectoryManager(root / "y")]

    DirectoryManager.rename_all(managers, RenameOptions.ADD_INCREMENTAL_NUMBERS_TO_END, separator=" ")

    assert [manager.name for manager in managers] == ["x 1", "y 2"]


def test_move_all_and_copy_all(make_tree, tmp_path: Path) -> None:
    root = make_tree("root", ["a", "b"])
    manager = DirectoryManager(root / "a")

    DirectoryManager.copy_all([manager, root / "b"], tmp_path / "copies")
    DirectoryManager.move_all([manager, str(root / "b")], tmp_path / "moved")

    assert {path.name for path in (tmp_path / "copies").iterdir()} == {"a", "b"}
    assert {path.name for path in (tmp_path / "moved").iterdir()} == {"a", "b"}
    assert manager.path == tmp_path / "moved" / "a"


def test_change_notification_follows_renames(make_tree) -> None:
    root = make_tree("root", ["watched"])
    created: list[ChangeNotifier] = []
    received: list[ChangeEvent] = []
    manager = DirectoryManager(root / "watched", notifier_factory=fake_notifiers(created))

    manager.subscribe(received.append, [ChangeType.CREATED])
    manager.enable_change_notification()
    manager.rename("moved")

    assert len(created) == 2
    assert not created[0].enabled
    assert created[1].enabled
    assert created[1].path == root / "moved"

    created[1].publish_raw("created", str(root / "moved" / "child"), is_directory=True)
    assert [event.name for event in received] == ["child"]
    assert manager.unsubscribe(received.append)


def test_context_manager_disables_notification(make_tree) -> None:
    created: list[ChangeNotifier] = []

    with DirectoryManager(make_tree("root", []), notifier_factory=fake_notifiers(created)) as manager:
        manager.enable_change_notification()
        manager.enable_change_notification()
        assert manager.change_notification_enabled

    assert len(created) == 1
    assert not manager.change_notification_enabled
    manager.disable_change_notification()


@pytest.mark.asyncio
async def test_async_wrappers(make_tree) -> None:
    left = DirectoryManager(make_tree("A", ["a", "b"], files={"a/f.txt": "1234"}))
    right = make_tree("B", ["b"])

    assert await left.compute_total_size_async() == 4
    assert [entity.name for entity in await left.compare_async(right)] == ["b"]
    assert [entity.name for entity in await left.search_async("a")] == ["a"]

    await DirectoryManager.rename_all_async(left.directories(), RenameOptions.DEFAULT)
    assert [entity.name for entity in left.directories()] == ["1-a", "2-b"]


def test_dropping_a_watching_handle_stops_the_observer(make_tree) -> None:
    manager = DirectoryManager(make_tree("root", []))
    manager.enable_change_notification()
    notifier = manager._notifier
    observer = notifier._backend._observer
    handle = weakref.ref(manager)

    del manager

    assert handle() is None
    assert not notifier.enabled
    assert not observer.is_alive()
