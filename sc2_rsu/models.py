"""Values passed between the stages of the upload pipeline."""

import enum
import threading
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class StableReplay:
    """A replay that has stopped growing and is large enough to upload."""
    path: Path
    size: int


@dataclass(frozen=True)
class UploadRequest:
    """A replay accepted by sc2replaystats, identified by its queue id."""
    rqid: str
    map_name: str
    path: Path | None = None


class PollOutcome(enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class PollResult:
    """Terminal result of polling one UploadRequest."""
    request: UploadRequest
    outcome: PollOutcome
    replay_id: str = ""
    error: str = ""
    polls: int = 0

    @property
    def succeeded(self) -> bool:
        return self.outcome is PollOutcome.SUCCEEDED


@dataclass
class UploadRecord:
    """Record of a single replay's trip through the pipeline."""
    map_name: str
    path: str = ""
    rqid: str = ""
    replay_id: str = ""
    uploaded: bool = False
    processed: bool = False
    error: str = ""


@dataclass
class PipelineStats:
    """Aggregated pipeline counters, safe to update from any thread."""
    total_detected: int = 0
    total_uploaded: int = 0
    total_upload_failed: int = 0
    total_processed: int = 0
    total_poll_failed: int = 0
    history: list[UploadRecord] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def detected(self) -> None:
        with self._lock:
            self.total_detected += 1

    def record_upload(self, rec: UploadRecord) -> None:
        with self._lock:
            if rec.uploaded:
                self.total_uploaded += 1
            else:
                self.total_upload_failed += 1
            self._append(rec)

    def record_poll(self, result: PollResult) -> None:
        with self._lock:
            rec = UploadRecord(
                map_name=result.request.map_name,
                path=str(result.request.path or ""),
                rqid=result.request.rqid,
                replay_id=result.replay_id,
                uploaded=True,
                processed=result.succeeded,
                error=result.error,
            )
            if result.succeeded:
                self.total_processed += 1
            else:
                self.total_poll_failed += 1
            self._append(rec)

    def failures(self) -> list[UploadRecord]:
        """Return the recorded uploads and polls that did not succeed."""
        with self._lock:
            return [r for r in self.history if r.error]

    def processed(self) -> list[UploadRecord]:
        with self._lock:
            return [r for r in self.history if r.processed]

    def _append(self, rec: UploadRecord) -> None:
        self.history.append(rec)
        # Keep last 1000 records
        if len(self.history) > 1000:
            self.history = self.history[-1000:]
