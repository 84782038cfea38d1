"""
Headless runner for SC2 Replay Uploader.

Starts the replay pipeline (watcher + uploader + poller) and blocks in
the foreground until SIGINT/SIGTERM.
"""

import logging
import signal
import threading
import time

from sc2_rsu.api import ReplayStatsClient
from sc2_rsu.config import Config
from sc2_rsu.models import PipelineStats
from sc2_rsu.paths import ResolutionError, get_watch_paths
from sc2_rsu.pipeline import ReplayPipeline
from sc2_rsu.poller import StatusPoller
from sc2_rsu.stability import StabilityDetector

logger = logging.getLogger(__name__)


def build_pipeline(cfg: Config, client: ReplayStatsClient | None = None) -> ReplayPipeline:
    """
    Create the replay pipeline from configuration without starting it.

    Raises ConfigError for a missing/invalid API key and ResolutionError
    when no replay directory can be watched.
    """
    key = cfg.require_apikey()
    paths = get_watch_paths(cfg)
    if not paths:
        raise ResolutionError(
            f"no Replays/Multiplayer directories found below {cfg.replays_root}"
        )

    client = client or ReplayStatsClient(key)
    stats = PipelineStats()
    return ReplayPipeline(
        client,
        paths,
        detector=StabilityDetector(interval=cfg.stability_interval),
        poller=StatusPoller(client, interval=cfg.status_interval, stats=stats),
        stats=stats,
    )


def run_foreground(cfg: Config, started: float | None = None) -> None:
    """Run the uploader until SIGINT/SIGTERM."""
    started = started or time.monotonic()
    pipeline = build_pipeline(cfg)

    logger.info("Starting Automatic Replay Uploader...")
    pipeline.start()

    stop = threading.Event()

    def _handler(sig, frame):
        print()
        logger.warning("Received signal: %s, Quitting.", signal.Signals(sig).name)
        stop.set()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)

    logger.debug("Startup took: %.3fs", time.monotonic() - started)
    logger.info("Ready!")
    try:
        while not stop.is_set():
            stop.wait(timeout=1)
    finally:
        pipeline.stop()
        pipeline.client.close()
        log_session_summary(pipeline.stats)


def log_session_summary(stats: PipelineStats) -> None:
    """Log the session counters and every replay that did not make it."""
    logger.info(
        "Session: %d detected, %d uploaded, %d processed, %d failed",
        stats.total_detected,
        stats.total_uploaded,
        stats.total_processed,
        stats.total_upload_failed + stats.total_poll_failed,
    )
    for rec in stats.processed():
        logger.debug("  processed: [%s] %s -> %s", rec.rqid, rec.map_name, rec.replay_id)
    for rec in stats.failures():
        if rec.uploaded:
            logger.warning("  not processed: [%s] %s: %s", rec.rqid, rec.map_name, rec.error)
        else:
            logger.warning("  not uploaded: %s (%s): %s", rec.map_name, rec.path, rec.error)
