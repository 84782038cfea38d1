"""Entry point for SC2 Replay Uploader.

Usage:
    python -m sc2_rsu [run]          Watch for replays and upload them
    python -m sc2_rsu login <apikey> Store an sc2replaystats API key
    python -m sc2_rsu paths          Show the replay directories being watched
"""

import argparse
import logging
import sys
import time

from sc2_rsu import __app_name__, __version__
from sc2_rsu.api import valid_api_key
from sc2_rsu.config import Config, ConfigError
from sc2_rsu.logging_setup import setup_logging
from sc2_rsu.paths import ResolutionError, get_watch_paths
from sc2_rsu.watcher import WatchError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sc2-rsu",
        description=f"{__app_name__}: unofficial sc2replaystats uploader",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at DEBUG level")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("run", help="watch for new replays and upload them (default)")
    login = sub.add_parser("login", help="add an sc2replaystats API key to the config file")
    login.add_argument("apikey", help="API key from your sc2replaystats account settings")
    sub.add_parser("paths", help="print the replay directories that would be watched")
    return parser


def _login(cfg: Config, apikey: str) -> int:
    if not valid_api_key(apikey):
        if "@" in apikey:
            print("Logging in with an e-mail address is not supported; "
                  "copy the API key from your sc2replaystats account settings instead.")
        else:
            print("That does not look like an sc2replaystats API key.")
        return 2
    cfg.apikey = apikey
    cfg.save()
    logger.info("API key saved to %s", cfg.path)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the requested command."""
    started = time.monotonic()
    args = _build_parser().parse_args(argv)

    cfg = Config()
    setup_logging(cfg, level="DEBUG" if args.verbose else None)

    try:
        if args.command == "login":
            return _login(cfg, args.apikey)
        if args.command == "paths":
            for p in get_watch_paths(cfg):
                print(p)
            return 0

        from sc2_rsu.service import run_foreground

        run_foreground(cfg, started=started)
        return 0
    except (ConfigError, ResolutionError, WatchError) as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        print()
        logger.warning("Interrupted during startup, Quitting.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
