"""Tests for :mod:`directory_manager.watcher`."""
from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from directory_manager.config import ChangeType, WatchState
from directory_manager.exceptions import DirectoryNotFoundError
from directory_manager.models import ChangeEvent
from directory_manager.watcher import ChangeNotifier, translate_event


class RecordingBackend:
    def __init__(self, notifier: ChangeNotifier) -> None:
        self.notifier = notifier
        self.started = 0
        self.stopped = 0

    def start(self) -> None:
        self.started += 1

    def stop(self) -> None:
        self.stopped += 1


@pytest.fixture()
def fake_notifier(tmp_path: Path):
    backends: list[RecordingBackend] = []

    def backend_factory(notifier: ChangeNotifier) -> RecordingBackend:
        backend = RecordingBackend(notifier)
        backends.append(backend)
        return backend

    notifier = ChangeNotifier(tmp_path, backend_factory=backend_factory)
    notifier._test_backends = backends  # type: ignore[attr-defined]
    yield notifier
    notifier.disable()


def wait_for_events(
    events: list[ChangeEvent],
    predicate,
    *,
    timeout: float = 5.0,
    settle: float = 0.5,
) -> list[ChangeEvent]:
    """Poll until *predicate* matches, then wait *settle* seconds for late duplicates."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if any(predicate(event) for event in events):
            time.sleep(settle)
            break
        time.sleep(0.05)
    return [event for event in events if predicate(event)]


def test_translate_created_event(tmp_path: Path) -> None:
    child = tmp_path / "new"

    event = translate_event(tmp_path, "created", str(child), is_directory=True)

    assert event is not None
    assert event.change_type is ChangeType.CREATED
    assert event.full_path == str(child)
    assert event.name == "new"
    assert event.old_full_path is None
    assert event.old_name is None
    assert event.is_directory


def test_translate_moved_event_sets_old_fields(tmp_path: Path) -> None:
    event = translate_event(tmp_path, "moved", str(tmp_path / "old"), str(tmp_path / "new"))

    assert event is not None
    assert event.change_type is ChangeType.RENAMED
    assert event.full_path == str(tmp_path / "new")
    assert event.name == "new"
    assert event.old_full_path == str(tmp_path / "old")
    assert event.old_name == "old"


def test_translate_maps_modified_and_deleted(tmp_path: Path) -> None:
    changed = translate_event(tmp_path, "modified", str(tmp_path / "f.txt"))
    deleted = translate_event(tmp_path, "deleted", os.fsencode(str(tmp_path / "gone")))

    assert changed is not None and changed.change_type is ChangeType.CHANGED
    assert deleted is not None and deleted.change_type is ChangeType.DELETED
    assert deleted.full_path == str(tmp_path / "gone")


def test_translate_ignores_root_and_unknown_types(tmp_path: Path) -> None:
    assert translate_event(tmp_path, "modified", str(tmp_path)) is None
    assert translate_event(tmp_path, "opened", str(tmp_path / "f.txt")) is None
    assert translate_event(tmp_path, "closed", str(tmp_path / "f.txt")) is None


def test_enable_is_idempotent(fake_notifier: ChangeNotifier) -> None:
    fake_notifier.enable()
    fake_notifier.enable()

    backends = fake_notifier._test_backends  # type: ignore[attr-defined]
    assert len(backends) == 1
    assert backends[0].started == 1
    assert fake_notifier.state is WatchState.ENABLED


def test_disable_twice_is_safe(fake_notifier: ChangeNotifier) -> None:
    fake_notifier.disable()
    fake_notifier.enable()
    fake_notifier.disable()
    fake_notifier.disable()

    backends = fake_notifier._test_backends  # type: ignore[attr-defined]
    assert backends[0].stopped == 1
    assert fake_notifier.state is WatchState.DISABLED


def test_events_reach_subscribers_only_while_enabled(fake_notifier: ChangeNotifier, tmp_path: Path) -> None:
    received: list[ChangeEvent] = []
    fake_notifier.subscribe(received.append)

    fake_notifier.publish_raw("created", str(tmp_path / "before"), is_directory=True)
    fake_notifier.enable()
    fake_notifier.publish_raw("created", str(tmp_path / "during"), is_directory=True)
    fake_notifier.disable()
    fake_notifier.publish_raw("created", str(tmp_path / "after"), is_directory=True)

    assert [event.name for event in received] == ["during"]


def test_publish_without_subscribers_is_a_no_op(fake_notifier: ChangeNotifier, tmp_path: Path) -> None:
    fake_notifier.enable()

    event = fake_notifier.publish_raw("deleted", str(tmp_path / "x"))

    assert event is not None
    assert not fake_notifier.has_subscribers


def test_change_type_filter_and_unsubscribe(fake_notifier: ChangeNotifier, tmp_path: Path) -> None:
    renames: list[ChangeEvent] = []
    everything: list[ChangeEvent] = []
    fake_notifier.subscribe(renames.append, [ChangeType.RENAMED])
    fake_notifier.subscribe(everything.append)
    fake_notifier.enable()

    fake_notifier.publish_raw("created", str(tmp_path / "a"))
    fake_notifier.publish_raw("moved", str(tmp_path / "a"), str(tmp_path / "b"))
    assert fake_notifier.unsubscribe(everything.append)
    assert not fake_notifier.unsubscribe(everything.append)
    fake_notifier.publish_raw("deleted", str(tmp_path / "b"))

    assert [event.change_type for event in renames] == [ChangeType.RENAMED]
    assert [event.change_type for event in everything] == [ChangeType.CREATED, ChangeType.RENAMED]


def test_failing_callback_does_not_block_others(fake_notifier: ChangeNotifier, tmp_path: Path) -> None:
    received: list[ChangeEvent] = []

    def broken(event: ChangeEvent) -> None:
        raise RuntimeError("boom")

    fake_notifier.subscribe(broken)
    fake_notifier.subscribe(received.append)
    fake_notifier.enable()
    fake_notifier.publish_raw("created", str(tmp_path / "a"))

    assert len(received) == 1


def test_enable_missing_directory(tmp_path: Path) -> None:
    notifier = ChangeNotifier(tmp_path / "missing", backend_factory=RecordingBackend)

    with pytest.raises(DirectoryNotFoundError):
        notifier.enable()
    assert notifier.state is WatchState.DISABLED


def test_backend_failure_leaves_notifier_disabled(tmp_path: Path) -> None:
    class FailingBackend(RecordingBackend):
        def start(self) -> None:
            raise OSError("inotify limit reached")

    notifier = ChangeNotifier(tmp_path, backend_factory=FailingBackend)

    with pytest.raises(OSError):
        notifier.enable()
    assert notifier.state is WatchState.DISABLED


def test_watchdog_reports_create_rename_and_stops(tmp_path: Path) -> None:
    received: list[ChangeEvent] = []
    notifier = ChangeNotifier(tmp_path)
    notifier.subscribe(received.append)
    notifier.enable()
    try:
        time.sleep(0.2)
        (tmp_path / "child").mkdir()
        created = wait_for_events(
            received,
            lambda event: event.change_type is ChangeType.CREATED and event.name == "child",
        )
        assert len(created) == 1
        assert created[0].old_full_path is None

        (tmp_path / "child").rename(tmp_path / "renamed")
        renamed = wait_for_events(received, lambda event: event.change_type is ChangeType.RENAMED)
        assert len(renamed) == 1
        assert renamed[0].full_path == str(tmp_path / "renamed")
        assert renamed[0].old_full_path == str(tmp_path / "child")
        assert renamed[0].name != renamed[0].old_name
    finally:
        notifier.disable()

    seen = len(received)
    (tmp_path / "late").mkdir()
    time.sleep(0.5)
    assert len(received) == seen
