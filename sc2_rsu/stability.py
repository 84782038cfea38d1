"""Decides when StarCraft II has finished writing a replay file.

The game writes a replay in a short burst.  The file is sampled on a fixed
interval and declared stable the first time it is above the minimum replay
size and has not grown since the previous sample.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from pathlib import Path

from sc2_rsu.models import StableReplay

logger = logging.getLogger(__name__)

# Smallest replay seen in the wild is 27418 bytes (a ~3 second game).
VALID_REPLAY_SIZE = 26 * 1024
STABILITY_INTERVAL = 0.25  # seconds


class StabilityDetector:
    """Size-polling stability check for a single file at a time.

    ``sleep`` and ``stat`` are injectable so the loop can be driven
    without a real clock or filesystem.
    """

    def __init__(
        self,
        interval: float = STABILITY_INTERVAL,
        min_size: int = VALID_REPLAY_SIZE,
        sleep: Callable[[float], None] = time.sleep,
        stat: Callable[[Path], os.stat_result] = os.stat,
    ):
        self.interval = interval
        self.min_size = min_size
        self._sleep = sleep
        self._stat = stat

    def wait_until_stable(
        self, path: Path, max_checks: int | None = None
    ) -> StableReplay | None:
        """Block until *path* stops growing above the minimum size.

        A file that cannot be stat'ed, or never grows past the minimum size,
        is waited on forever.  *max_checks* caps the number of samples; when
        it is exhausted ``None`` is returned.
        """
        last_size = 0
        checks = 0
        while max_checks is None or checks < max_checks:
            self._sleep(self.interval)
            checks += 1

            try:
                size = self._stat(path).st_size
            except OSError as exc:
                logger.debug("stat %s failed (%s); retrying", path, exc)
                continue

            if size <= self.min_size:
                continue
            if size > last_size:
                last_size = size
                continue

            logger.debug("%s stable at %d bytes after %d checks", path, size, checks)
            return StableReplay(path=Path(path), size=size)

        logger.debug("Gave up on %s after %d checks", path, checks)
        return None
