"""
Minimal sc2replaystats API client.

Only the two calls the uploader needs are implemented: submitting a
replay file and asking for the processing status of a submission.
A single client is shared by every upload/poll thread.
"""

from __future__ import annotations

import logging
import os
import re
import threading
from typing import Any

import requests

from sc2_rsu import __version__

logger = logging.getLogger(__name__)

API_ROOT = "https://api.sc2replaystats.com"

# <40 hex digit hash>;<account id>;<key id>
_API_KEY_RE = re.compile(r"^[0-9a-fA-F]{40};[0-9]+;[0-9]+$")

_TIMEOUT = 30  # seconds, per request


class ApiError(Exception):
    """A request to sc2replaystats failed or returned something unusable."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def valid_api_key(key: str) -> bool:
    """Return whether *key* looks like an sc2replaystats API key."""
    return bool(key) and _API_KEY_RE.match(key.strip()) is not None


class ReplayStatsClient:
    """
    Thread-safe sc2replaystats client.

    Parameters
    ----------
    api_key : str
        Authorization key, already validated by ``valid_api_key``.
    api_root : str
        Base URL of the API (overridable for testing).
    session : requests.Session, optional
        Session to send requests through.
    """

    def __init__(
        self,
        api_key: str,
        api_root: str = API_ROOT,
        session: requests.Session | None = None,
        timeout: float = _TIMEOUT,
    ):
        if not valid_api_key(api_key):
            raise ValueError("invalid sc2replaystats API key")
        self._api_root = api_root.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": api_key.strip(),
                "User-Agent": f"sc2-rsu/{__version__}",
                "Accept": "application/json",
            }
        )
        self._lock = threading.Lock()

    # ---- public API ----

    def upload_replay(self, path: str | os.PathLike) -> str:
        """Upload the replay at *path* and return its queue id (``rqid``).

        The file is read from disk now, not before.
        """
        filename = os.path.basename(os.fspath(path))
        with open(path, "rb") as fh:
            data = self._request(
                "POST",
                "/replay",
                files={"replay_file": (filename, fh, "application/octet-stream")},
                data={"upload_method": "ext"},
            )
        rqid = data.get("replay_queue_id")
        if rqid in (None, ""):
            raise ApiError(f"upload response carried no replay_queue_id: {data}")
        return str(rqid)

    def get_replay_status(self, rqid: str) -> str:
        """Return the replay id for *rqid*, or ``""`` while still processing."""
        data = self._request("GET", f"/replay/status/{rqid}")
        replay_id = data.get("replay_id")
        if replay_id in (None, "", 0):
            return ""
        return str(replay_id)

    def close(self) -> None:
        self._session.close()

    # ---- internals ----

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> dict[str, Any]:
        url = self._api_root + endpoint
        try:
            with self._lock:
                resp = self._session.request(
                    method, url, timeout=self._timeout, **kwargs
                )
        except requests.RequestException as exc:
            raise ApiError(f"{method} {endpoint}: {exc}") from exc

        logger.debug("%s %s -> %d", method, endpoint, resp.status_code)
        if not resp.ok:
            raise ApiError(
                f"{method} {endpoint}: HTTP {resp.status_code} {resp.reason}",
                status_code=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise ApiError(f"{method} {endpoint}: response is not JSON") from exc
        if not isinstance(data, dict):
            raise ApiError(f"{method} {endpoint}: unexpected response {data!r}")
        return data
