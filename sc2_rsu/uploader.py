"""
Replay upload stage.

Submits a stable replay to sc2replaystats and hands the returned queue id
to a StatusPoller running in its own background thread.  A failed upload is
reported once and the replay is dropped; uploads are never retried.
"""

import logging
import threading

from sc2_rsu.api import ApiError
from sc2_rsu.models import PipelineStats, StableReplay, UploadRecord, UploadRequest
from sc2_rsu.poller import StatusPoller
from sc2_rsu.utils import split_filepath

logger = logging.getLogger(__name__)


class ReplayUploader:
    """
    Uploads replays and schedules one status poll per accepted upload.

    Parameters
    ----------
    client : ReplayStatsClient
        Shared API client (``upload_replay`` / ``get_replay_status``).
    poller : StatusPoller
        Poller used for every accepted upload.
    stats : PipelineStats, optional
        Aggregated counters to record outcomes into.
    """

    def __init__(
        self,
        client,
        poller: StatusPoller,
        stats: PipelineStats | None = None,
    ):
        self._client = client
        self._poller = poller
        self.stats = stats or PipelineStats()
        self._active_polls: int = 0
        self._lock = threading.Lock()

    @property
    def active_polls(self) -> int:
        with self._lock:
            return self._active_polls

    def upload(self, replay: StableReplay) -> UploadRequest | None:
        """Upload *replay*; on success schedule its poller and return at once."""
        _, map_name, _ = split_filepath(replay.path)
        rec = UploadRecord(map_name=map_name, path=str(replay.path))
        logger.debug("uploading replay: %s (%d bytes)", replay.path, replay.size)

        try:
            rqid = self._client.upload_replay(replay.path)
        except (ApiError, OSError) as exc:
            rec.error = str(exc)
            self.stats.record_upload(rec)
            logger.error("failed to upload replay: %s: %s", map_name, exc)
            return None

        rec.rqid = rqid
        rec.uploaded = True
        self.stats.record_upload(rec)
        logger.info("sc2replaystats accepted : [%s] %s", rqid, map_name)

        request = UploadRequest(rqid=rqid, map_name=map_name, path=replay.path)
        self.schedule_poll(request)
        return request

    def schedule_poll(self, request: UploadRequest) -> threading.Thread:
        """Start polling *request* in a background thread and return the thread."""
        thread = threading.Thread(
            target=self._do_poll,
            args=(request,),
            daemon=True,
            name=f"Poll-{request.rqid}",
        )
        with self._lock:
            self._active_polls += 1
        thread.start()
        return thread

    def _do_poll(self, request: UploadRequest) -> None:
        try:
            self._poller.poll(request)
        except Exception:
            logger.exception("Unexpected error polling %s", request.rqid)
        finally:
            with self._lock:
                self._active_polls -= 1
