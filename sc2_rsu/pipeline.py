"""
Wires the replay pipeline together.

    watcher --(thread per replay)--> stability --> upload --(thread)--> poll

Each new replay is handled in its own daemon thread so a slow upload or a
replay that never finishes writing never holds up the next one.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from sc2_rsu.models import PipelineStats, UploadRequest
from sc2_rsu.poller import StatusPoller
from sc2_rsu.stability import StabilityDetector
from sc2_rsu.uploader import ReplayUploader
from sc2_rsu.watcher import ReplayWatcher

logger = logging.getLogger(__name__)


class ReplayPipeline:
    """Detects, uploads and follows replays written to *watch_paths*."""

    def __init__(
        self,
        client,
        watch_paths: Iterable[Path],
        detector: StabilityDetector | None = None,
        poller: StatusPoller | None = None,
        stats: PipelineStats | None = None,
        watcher_kwargs: dict | None = None,
    ):
        self.client = client
        self.stats = stats or PipelineStats()
        self.detector = detector or StabilityDetector()
        self.poller = poller or StatusPoller(client, stats=self.stats)
        self.uploader = ReplayUploader(client, self.poller, stats=self.stats)
        self.watcher = ReplayWatcher(watch_paths, self.dispatch, **(watcher_kwargs or {}))

    # ---- lifecycle ----

    def start(self) -> None:
        self.watcher.start()

    def stop(self) -> None:
        self.watcher.stop()

    # ---- per replay ----

    def dispatch(self, path: Path) -> threading.Thread:
        """Handle *path* in a new background thread and return that thread."""
        self.stats.detected()
        thread = threading.Thread(
            target=self._run,
            args=(path,),
            daemon=True,
            name=f"Replay-{path.name}",
        )
        thread.start()
        return thread

    def handle_replay(self, path: Path) -> UploadRequest | None:
        """Wait for *path* to finish writing, then upload it."""
        replay = self.detector.wait_until_stable(path)
        if replay is None:
            return None
        return self.uploader.upload(replay)

    def _run(self, path: Path) -> None:
        try:
            self.handle_replay(path)
        except Exception:
            logger.exception("Unexpected error handling replay %s", path)
        finally:
            self.watcher.release(path)
