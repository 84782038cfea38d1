import logging
import logging.handlers

import pytest

from sc2_rsu.logging_setup import setup_logging


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers = handlers
    root.setLevel(level)


def test_installs_rotating_file_and_stderr(cfg, tmp_path, clean_root_logger):
    cfg.max_log_size_mb = 2
    cfg.log_backup_count = 4
    log_path = tmp_path / "sc2_rsu.log"

    setup_logging(cfg, log_path=log_path)
    logging.getLogger("sc2_rsu.test").info("hello from the test")

    rotating = [h for h in clean_root_logger.handlers
                if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(rotating) == 1
    assert rotating[0].maxBytes == 2 * 1024 * 1024
    assert rotating[0].backupCount == 4
    rotating[0].flush()
    assert "[INFO] sc2_rsu.test: hello from the test" in log_path.read_text(encoding="utf-8")


def test_level_override(cfg, tmp_path, clean_root_logger):
    setup_logging(cfg, log_path=tmp_path / "x.log", level="debug")
    assert clean_root_logger.level == logging.DEBUG
