"""
Cross-platform utilities for SC2 Replay Uploader.

Centralises all OS-detection logic so every other module can import
a single canonical set of helpers rather than scattering ``sys.platform``
checks throughout the codebase.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

# ---- platform flags ----------------------------------------------------

IS_WINDOWS: bool = sys.platform == "win32"
IS_MACOS: bool = sys.platform == "darwin"

_APP_DIR_NAME = "SC2ReplayUploader"

# ---- directories -------------------------------------------------------


def get_config_dir() -> Path:
    """
    Return the application config directory, created if needed.

    - Windows : ``%APPDATA%\\SC2ReplayUploader``
    - macOS   : ``~/Library/Application Support/SC2ReplayUploader``
    - Linux   : ``$XDG_CONFIG_HOME/SC2ReplayUploader`` (default ``~/.config``)
    """
    if IS_WINDOWS:
        base = os.environ.get("APPDATA", str(Path.home()))
    elif IS_MACOS:
        base = str(Path.home() / "Library" / "Application Support")
    else:
        base = os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))

    config_dir = Path(base) / _APP_DIR_NAME
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_log_path() -> Path:
    """Return the path to the log file (inside the config directory)."""
    return get_config_dir() / "sc2_rsu.log"


def get_scan_root() -> Path:
    """Return where to start looking for a StarCraft II installation.

    The user's home directory when it can be determined, otherwise the
    filesystem root.
    """
    try:
        return Path.home()
    except (KeyError, RuntimeError):
        logger.debug("Home directory unavailable; scanning from filesystem root.")
        return Path(os.path.abspath(os.sep))
