"""Follows an accepted upload until sc2replaystats has processed it."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from sc2_rsu.api import ApiError
from sc2_rsu.models import PipelineStats, PollOutcome, PollResult, UploadRequest

logger = logging.getLogger(__name__)

STATUS_INTERVAL = 1.0  # seconds


class StatusPoller:
    """
    Polls the replay status of one request at a time.

    Submitted -> Polling* -> Succeeded | Failed.  There is no retry: the
    first failed status query ends polling for that request.
    """

    def __init__(
        self,
        client,
        interval: float = STATUS_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        stats: PipelineStats | None = None,
    ):
        self._client = client
        self.interval = interval
        self._sleep = sleep
        self._stats = stats

    def poll(
        self, request: UploadRequest, max_polls: int | None = None
    ) -> PollResult | None:
        """Query the status of *request* until it reaches a terminal state.

        Returns ``None`` only if *max_polls* was given and exhausted.
        """
        polls = 0
        while max_polls is None or polls < max_polls:
            self._sleep(self.interval)
            polls += 1

            try:
                replay_id = self._client.get_replay_status(request.rqid)
            except ApiError as exc:
                logger.error("error checking replay status: %s: %s", request.rqid, exc)
                return self._finish(
                    PollResult(request, PollOutcome.FAILED, error=str(exc), polls=polls)
                )

            if replay_id:
                logger.info(
                    "sc2replaystats processed: [%s] %s (%s)",
                    request.rqid, replay_id, request.map_name,
                )
                return self._finish(
                    PollResult(
                        request, PollOutcome.SUCCEEDED, replay_id=replay_id, polls=polls
                    )
                )

            logger.debug("sc2replaystats processing: [%s] %s", request.rqid, request.map_name)

        return None

    def _finish(self, result: PollResult) -> PollResult:
        if self._stats is not None:
            self._stats.record_poll(result)
        return result
