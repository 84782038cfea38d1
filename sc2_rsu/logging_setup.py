"""Log configuration shared by every entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path

from sc2_rsu.config import Config, get_log_path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(cfg: Config, log_path: Path | None = None, level: str | None = None) -> None:
    """Configure rotating file log and stderr handler."""
    log_path = log_path or get_log_path()
    level_name = (level or cfg.log_level).upper()
    lvl = getattr(logging, level_name, logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(lvl)

    fmt = logging.Formatter(LOG_FORMAT)

    # Rotating file handler
    max_bytes = cfg.max_log_size_mb * 1024 * 1024
    fh = logging.handlers.RotatingFileHandler(
        str(log_path),
        maxBytes=max_bytes,
        backupCount=cfg.log_backup_count,
        encoding="utf-8",
    )
    fh.setLevel(lvl)
    fh.setFormatter(fmt)
    root_logger.addHandler(fh)

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(lvl)
    sh.setFormatter(fmt)
    root_logger.addHandler(sh)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(lvl, logging.INFO))
