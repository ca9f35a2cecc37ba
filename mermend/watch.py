"""File watcher with debounce for re-rendering a diagram source on change."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class _DebouncedHandler(FileSystemEventHandler):
    """Filters events down to one file and fires once the file has been quiet.

    Each event restarts the debounce timer, so a burst of saves yields a
    single callback after the last one. A zero window calls back inline.
    """

    def __init__(
        self,
        target: Path,
        debounce_seconds: float,
        callback: Callable[[Path], None],
    ) -> None:
        super().__init__()
        self._target = target
        self._debounce = debounce_seconds
        self._callback = callback
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def _touches_target(self, event: FileSystemEvent) -> bool:
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(p and Path(p).resolve() == self._target for p in paths)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type in ("opened", "closed_no_write"):
            return
        if not self._touches_target(event):
            return

        if self._debounce <= 0:
            self._fire()
            return

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop a pending callback, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self) -> None:
        try:
            self._callback(self._target)
        except Exception:
            logger.exception("Watcher callback failed for %s", self._target)


class DiagramWatcher:
    """Watches a single diagram source file and calls back on each change.

    watchdog cannot watch a lone file portably, so the parent directory is
    observed non-recursively and events are filtered to the target. Editor
    save patterns (temp file + rename) are caught through ``dest_path``.
    """

    def __init__(
        self,
        path: Path,
        callback: Callable[[Path], None],
        debounce_seconds: float = 0.5,
    ) -> None:
        self._path = Path(path).resolve()
        self._observer: Observer | None = None
        self._handler = _DebouncedHandler(self._path, debounce_seconds, callback)

    @property
    def path(self) -> Path:
        return self._path

    def start(self) -> None:
        if self._observer is not None:
            return
        self._observer = Observer()
        self._observer.schedule(self._handler, str(self._path.parent), recursive=False)
        self._observer.start()
        logger.info("Watching %s for changes", self._path)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._handler.cancel()
        self._observer = None
        logger.info("Stopped watching %s", self._path)
