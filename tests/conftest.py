"""Shared fixtures for the sc2_rsu test suite."""

import os
from pathlib import Path

import pytest

from sc2_rsu.config import Config

VALID_KEY = "0123456789abcdef0123456789abcdef01234567;12345;678"


@pytest.fixture
def cfg(tmp_path):
    """A Config backed by a file inside the test's temp directory."""
    return Config(path=tmp_path / "config" / "config.json")


def make_toon(accounts: Path, account: str, toon: str, multiplayer: bool = True) -> Path:
    """Create ``accounts/<account>/<toon>`` and optionally its replay folder."""
    toon_dir = accounts / account / toon
    toon_dir.mkdir(parents=True)
    replays = toon_dir / "Replays" / "Multiplayer"
    if multiplayer:
        replays.mkdir(parents=True)
    return replays


@pytest.fixture
def sc2_home(tmp_path):
    """A fake home directory holding one StarCraft II install with two profiles."""
    home = tmp_path / "home"
    accounts = home / "Documents" / "StarCraft II" / "Accounts"
    make_toon(accounts, "1111", "1-S2-1-100")
    make_toon(accounts, "1111", "2-S2-1-200", multiplayer=False)
    make_toon(accounts, "2222", "1-S2-1-300")
    (accounts / "1111" / "Hotkeys").mkdir()
    (accounts / "notanaccount").mkdir()
    return home


class FakeClient:
    """Scripted stand-in for ReplayStatsClient."""

    def __init__(self, rqid="R1", statuses=None, upload_error=None, status_error=None):
        self.rqid = rqid
        self.statuses = list(statuses or [])
        self.upload_error = upload_error
        self.status_error = status_error
        self.uploads = []
        self.status_calls = []
        self.closed = False

    def upload_replay(self, path):
        self.uploads.append(os.fspath(path))
        if self.upload_error is not None:
            raise self.upload_error
        return self.rqid

    def get_replay_status(self, rqid):
        self.status_calls.append(rqid)
        if self.status_error is not None:
            raise self.status_error
        return self.statuses.pop(0) if self.statuses else ""

    def close(self):
        self.closed = True
