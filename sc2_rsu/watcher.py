"""File system watcher for SC2 Replay Uploader.

Uses the watchdog library to monitor the multiplayer replay folders of
every account and hands each newly created replay to a callback.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from watchdog.events import FileCreatedEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

# SC2 sometimes writes "*.SC2Replay.writeCacheBackup" files next to the
# replay; matching the tail of the name keeps those out.
REPLAY_SUFFIX = "eplay"


class WatchError(RuntimeError):
    """A replay directory could not be registered with the observer."""


def is_replay_candidate(path: str | os.PathLike) -> bool:
    """Return whether *path* names a replay worth waiting on."""
    return os.fspath(path).endswith(REPLAY_SUFFIX)


class ReplayEventHandler(FileSystemEventHandler):
    """Watchdog handler that forwards newly created replays.

    A path stays *pending* from the moment it is forwarded until
    ``release`` is called for it; further create events for a pending path
    are ignored so only one detection runs per file.
    """

    def __init__(self, on_candidate: Callable[[Path], Any]):
        super().__init__()
        self._on_candidate = on_candidate
        self._pending: set[Path] = set()
        self._lock = threading.Lock()

    def on_created(self, event: FileCreatedEvent) -> None:  # type: ignore[override]
        """Handle a new file creation event."""
        if event.is_directory:
            return
        src = os.fsdecode(event.src_path)
        if not is_replay_candidate(src):
            logger.debug("Ignoring %s", src)
            return

        path = Path(src)
        with self._lock:
            if path in self._pending:
                logger.debug("Already waiting on %s", path)
                return
            self._pending.add(path)

        logger.info("Replay detected: %s", path.name)
        try:
            self._on_candidate(path)
        except Exception as exc:
            self.release(path)
            logger.warning("fswatcher error: %s: %s", path, exc)

    def release(self, path: Path) -> None:
        """Forget *path* once its detection has finished."""
        with self._lock:
            self._pending.discard(Path(path))

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    @property
    def pending_files(self) -> list[str]:
        with self._lock:
            return [str(p) for p in self._pending]


class ReplayWatcher:
    """High-level watcher over a set of replay directories.

    Usage:
        watcher = ReplayWatcher(paths, on_candidate)
        watcher.start()
        ...
        watcher.stop()
    """

    def __init__(
        self,
        paths: Iterable[str | os.PathLike],
        on_candidate: Callable[[Path], Any],
        observer_factory: Callable[[], Any] = Observer,
    ):
        self.paths = [Path(p) for p in paths]
        self.handler = ReplayEventHandler(on_candidate)
        self._observer_factory = observer_factory
        self._observer: Any | None = None

    # ---- lifecycle ----

    def start(self) -> None:
        """Register every replay directory and start watching.

        Raises WatchError if any directory cannot be watched; the watcher
        never runs with only part of its directories.
        """
        observer = self._observer_factory()
        try:
            for path in self.paths:
                if not path.is_dir():
                    raise WatchError(f"failed to watch replay directory: {path}: not a directory")
                logger.debug("Watching replays directory: %s", path)
                try:
                    observer.schedule(self.handler, str(path), recursive=False)
                except OSError as exc:
                    raise WatchError(
                        f"failed to watch replay directory: {path}: {exc}"
                    ) from exc
            try:
                observer.start()
            except OSError as exc:
                raise WatchError(f"failed to watch replay directories: {exc}") from exc
        except Exception:
            observer.stop()
            raise

        self._observer = observer
        logger.info("Watching %d replay director%s", len(self.paths),
                    "y" if len(self.paths) == 1 else "ies")

    def stop(self) -> None:
        """Stop watching and release resources."""
        if self._observer:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None
            logger.info("Watcher stopped.")

    @property
    def is_running(self) -> bool:
        """Return whether the watcher is currently active."""
        return self._observer is not None and self._observer.is_alive()

    # ---- status ----

    @property
    def pending_count(self) -> int:
        """Return the number of replays still being written."""
        return self.handler.pending_count

    @property
    def pending_files(self) -> list[str]:
        return self.handler.pending_files

    def release(self, path: Path) -> None:
        self.handler.release(path)
