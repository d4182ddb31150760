"""Change notification for the direct contents of one directory.

Raw filesystem events delivered by :mod:`watchdog` are translated into a single
:class:`~directory_manager.models.ChangeEvent` shape and handed to subscriber
callbacks on the observer thread. Subscribers must do their own
synchronization.
"""
from __future__ import annotations

import logging
import os
import threading
import weakref
from pathlib import Path
from typing import Any, Callable, Iterable

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .config import ChangeType, WatchState
from .exceptions import DirectoryNotFoundError
from .logger import get_logger, log_event
from .models import ChangeEvent

LOGGER_NAME = "watcher"

ChangeCallback = Callable[[ChangeEvent], None]

_RAW_EVENT_TYPES: dict[str, ChangeType] = {
    EVENT_TYPE_CREATED: ChangeType.CREATED,
    EVENT_TYPE_DELETED: ChangeType.DELETED,
    EVENT_TYPE_MODIFIED: ChangeType.CHANGED,
    EVENT_TYPE_MOVED: ChangeType.RENAMED,
}


def _decode(path: str | bytes | None) -> str | None:
    if path is None or path == "" or path == b"":
        return None
    return os.path.abspath(os.fsdecode(path))


def translate_event(
    root: str | Path,
    event_type: str,
    src_path: str | bytes,
    dest_path: str | bytes | None = None,
    *,
    is_directory: bool = False,
) -> ChangeEvent | None:
    """Normalize one raw event observed under *root*.

    Returns ``None`` for event types other than created, deleted, modified and
    moved, and for events about *root* itself. For renames ``full_path`` is
    the new location and ``old_full_path`` the previous one; every other kind
    leaves the ``old_*`` fields empty.
    """

    change_type = _RAW_EVENT_TYPES.get(event_type)
    if change_type is None:
        return None

    root_path = os.path.abspath(os.fspath(root))
    source = _decode(src_path)
    if source is None:
        return None

    if change_type is ChangeType.RENAMED:
        destination = _decode(dest_path)
        if destination is None:
            return None
        return ChangeEvent(
            change_type=change_type,
            full_path=destination,
            name=os.path.basename(destination),
            old_full_path=source,
            old_name=os.path.basename(source),
            is_directory=is_directory,
        )

    if source == root_path:
        return None
    return ChangeEvent(
        change_type=change_type,
        full_path=source,
        name=os.path.basename(source),
        is_directory=is_directory,
    )


class _WatcherBackend:
    """Base protocol for change notification backends."""

    def start(self) -> None:  # pragma: no cover - exercised in integration
        raise NotImplementedError

    def stop(self) -> None:  # pragma: no cover - exercised in integration
        raise NotImplementedError


class _EventForwarder(FileSystemEventHandler):
    """watchdog handler forwarding every raw event to the notifier.

    Only a weak reference is kept so that dropping the notifier lets its
    finalizer release the observer.
    """

    def __init__(self, notifier: "ChangeNotifier") -> None:
        super().__init__()
        self._notifier_ref = weakref.ref(notifier)

    def on_any_event(self, event: FileSystemEvent) -> None:
        notifier = self._notifier_ref()
        if notifier is None:
            return
        notifier.publish_raw(
            event.event_type,
            event.src_path,
            getattr(event, "dest_path", None),
            is_directory=event.is_directory,
        )


class _WatchdogBackend(_WatcherBackend):
    """Non-recursive watchdog observer scoped to the notifier's path."""

    def __init__(self, notifier: "ChangeNotifier", *, join_timeout: float = 5.0) -> None:
        self._path = str(notifier.path)
        self._handler = _EventForwarder(notifier)
        self._observer: Any = None
        self._join_timeout = join_timeout

    def start(self) -> None:
        observer = Observer()
        observer.schedule(self._handler, self._path, recursive=False)
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        if threading.current_thread() is not observer:
            observer.join(self._join_timeout)


class ChangeNotifier:
    """Publishes normalized change events for one directory.

    ``enable()`` is idempotent and ``disable()`` may be called any number of
    times, including from a finalizer; the underlying observer is released
    exactly once per enable.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        backend_factory: Callable[["ChangeNotifier"], _WatcherBackend] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.path = Path(os.path.abspath(os.fspath(path)))
        self._backend_factory = backend_factory or _WatchdogBackend
        self._backend: _WatcherBackend | None = None
        self._state = WatchState.DISABLED
        self._state_lock = threading.RLock()
        self._subscribers: list[tuple[ChangeCallback, frozenset[ChangeType] | None]] = []
        self._subscribers_lock = threading.Lock()
        self.logger = get_logger(LOGGER_NAME, logger)

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._state is WatchState.ENABLED

    @property
    def has_subscribers(self) -> bool:
        with self._subscribers_lock:
            return bool(self._subscribers)

    def enable(self) -> None:
        with self._state_lock:
            if self._state is WatchState.ENABLED:
                return
            if not self.path.is_dir():
                raise DirectoryNotFoundError(path=self.path)

            self._state = WatchState.ENABLING
            backend = self._backend_factory(self)
            try:
                backend.start()
            except Exception as exc:
                self._state = WatchState.DISABLED
                log_event(
                    self.logger,
                    level=logging.ERROR,
                    action="watcher.backend_error",
                    message=f"Failed to watch {self.path}",
                    extra={"path": str(self.path), "error": repr(exc)},
                )
                raise
            self._backend = backend
            self._state = WatchState.ENABLED

        log_event(
            self.logger,
            level=logging.INFO,
            action="watcher.enable",
            message=f"Watching {self.path}",
            extra={"path": str(self.path)},
        )

    def disable(self) -> None:
        with self._state_lock:
            backend, self._backend = self._backend, None
            if backend is None:
                self._state = WatchState.DISABLED
                return
            self._state = WatchState.DISABLING
            try:
                backend.stop()
            finally:
                self._state = WatchState.DISABLED

        log_event(
            self.logger,
            level=logging.INFO,
            action="watcher.disable",
            message=f"Stopped watching {self.path}",
            extra={"path": str(self.path)},
        )

    close = disable

    def subscribe(
        self,
        callback: ChangeCallback,
        change_types: Iterable[ChangeType] | None = None,
    ) -> ChangeCallback:
        """Register *callback*, optionally only for the given *change_types*."""

        kinds = frozenset(ChangeType(kind) for kind in change_types) if change_types is not None else None
        with self._subscribers_lock:
            self._subscribers.append((callback, kinds))
        return callback

    def subscriptions(self) -> list[tuple[ChangeCallback, frozenset[ChangeType] | None]]:
        with self._subscribers_lock:
            return list(self._subscribers)

    def unsubscribe(self, callback: ChangeCallback) -> bool:
        with self._subscribers_lock:
            for index, (registered, _) in enumerate(self._subscribers):
                if registered == callback:
                    del self._subscribers[index]
                    return True
        return False

    def publish_raw(
        self,
        event_type: str,
        src_path: str | bytes,
        dest_path: str | bytes | None = None,
        *,
        is_directory: bool = False,
    ) -> ChangeEvent | None:
        """Translate a raw backend event and publish it."""

        event = translate_event(self.path, event_type, src_path, dest_path, is_directory=is_directory)
        if event is not None:
            self.publish(event)
        return event

    def publish(self, event: ChangeEvent) -> None:
        """Deliver *event* to the matching subscribers while enabled."""

        if self._state is not WatchState.ENABLED:
            return
        with self._subscribers_lock:
            subscribers = list(self._subscribers)
        if not subscribers:
            return

        log_event(
            self.logger,
            level=logging.DEBUG,
            action="watcher.event",
            message=f"{event.change_type.value} {event.full_path}",
            extra=event.to_dict(),
        )
        for callback, kinds in subscribers:
            if kinds is not None and event.change_type not in kinds:
                continue
            try:
                callback(event)
            except Exception as exc:
                log_event(
                    self.logger,
                    level=logging.ERROR,
                    action="watcher.callback_error",
                    message="Change callback raised an exception",
                    extra={"path": event.full_path, "error": repr(exc)},
                )

    def __del__(self) -> None:
        if getattr(self, "_backend", None) is None:
            return
        try:
            self.disable()
        except Exception:  # pragma: no cover - interpreter shutdown
            pass


__all__ = ["ChangeCallback", "ChangeNotifier", "translate_event"]
