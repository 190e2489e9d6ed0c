"""Change feed — notices template and component edits on disk.

``FileWatcher`` polls the modification times of every source file the
``FileSystemSource`` can see and reports the difference between two
polls as ``SourceChange`` events. The engine applies each event by
replacing (or dropping) the registry entry and then clearing the route
cache.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jigsaw.loader import FileSystemSource

logger = logging.getLogger("jigsaw.watch")


class ChangeKind(Enum):
    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"


class SourceKind(Enum):
    TEMPLATE = "template"
    COMPONENT = "component"


@dataclass(frozen=True, slots=True)
class SourceChange:
    """One change notification: which entry, and what happened to it."""

    name: str
    kind: ChangeKind
    source_kind: SourceKind = SourceKind.TEMPLATE


type Snapshot = dict[tuple[SourceKind, str], int]


def diff_snapshots(before: Snapshot, after: Snapshot) -> list[SourceChange]:
    """Compare two snapshots. Components are reported before templates."""
    changes: list[SourceChange] = []
    for key in sorted(before.keys() | after.keys(), key=lambda k: (k[0] is SourceKind.TEMPLATE, k[1])):
        source_kind, name = key
        if key not in before:
            changes.append(SourceChange(name, ChangeKind.ADDED, source_kind))
        elif key not in after:
            changes.append(SourceChange(name, ChangeKind.REMOVED, source_kind))
        elif before[key] != after[key]:
            changes.append(SourceChange(name, ChangeKind.CHANGED, source_kind))
    return changes


class FileWatcher:
    """Polling watcher running on a daemon thread.

    Usage::

        watcher = FileWatcher(source, engine.apply_change, interval=0.5)
        watcher.start()
        ...
        watcher.stop()

    ``poll()`` can also be called directly (tests do), in which case no
    thread is needed.
    """

    __slots__ = ("_interval", "_on_change", "_snapshot", "_source", "_stop", "_thread")

    def __init__(
        self,
        source: FileSystemSource,
        on_change: Callable[[SourceChange], None],
        *,
        interval: float = 0.5,
    ) -> None:
        self._source = source
        self._on_change = on_change
        self._interval = interval
        self._snapshot: Snapshot = source.snapshot()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll(self) -> list[SourceChange]:
        """Take a new snapshot, emit every difference, and return them."""
        current = self._source.snapshot()
        changes = diff_snapshots(self._snapshot, current)
        self._snapshot = current
        for change in changes:
            logger.info("%s %s: %s", change.source_kind.value.title(), change.kind.value, change.name)
            self._on_change(change)
        return changes

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._snapshot = self._source.snapshot()
        self._thread = threading.Thread(target=self._run, name="jigsaw-watch", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self._interval * 4)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.poll()
            except Exception:
                # Keep watching; a half-written file shows up again next poll
                logger.exception("Source poll failed")
