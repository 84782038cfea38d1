"""
Locates the replay directories to watch.

StarCraft II keeps one directory per Battle.net account under
``StarCraft II/Accounts``, and inside it one directory per profile
("toon", e.g. ``1-S2-1-1234567``).  Multiplayer replays of a profile are
saved to ``<toon>/Replays/Multiplayer``.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from pathlib import Path

from sc2_rsu.config import Config
from sc2_rsu.platform_utils import get_scan_root

logger = logging.getLogger(__name__)

_GAME_DIR = "StarCraft II"
_ACCOUNTS_DIR = "Accounts"
_TOON_RE = re.compile(r"^\d+-S2-\d+-\d+$")
_MENU_WIDTH = 40


class ResolutionError(RuntimeError):
    """No replay directory could be determined."""


def find_replays_root(scan_root: str | os.PathLike) -> list[Path]:
    """Return every ``StarCraft II/Accounts`` directory below *scan_root*."""
    found: list[Path] = []

    def _onerror(exc: OSError) -> None:
        logger.debug("Skipping unreadable directory: %s", exc)

    for dirpath, dirnames, _ in os.walk(scan_root, onerror=_onerror):
        if os.path.basename(dirpath) == _GAME_DIR and _ACCOUNTS_DIR in dirnames:
            found.append(Path(dirpath) / _ACCOUNTS_DIR)
        # Don't descend into hidden directories or an Accounts tree we already found
        dirnames[:] = [
            d for d in dirnames
            if not d.startswith(".")
            and not (d == _ACCOUNTS_DIR and os.path.basename(dirpath) == _GAME_DIR)
        ]
    return sorted(found)


def enumerate_accounts(root: str | os.PathLike) -> list[str]:
    """Return ``"<account>/<toon>"`` for every profile below *root*."""
    root = Path(root)
    try:
        accounts = sorted(p for p in root.iterdir() if p.is_dir() and p.name.isdigit())
    except OSError as exc:
        raise ResolutionError(f"unable to list accounts in {root}: {exc}") from exc

    toons: list[str] = []
    for account in accounts:
        try:
            children = sorted(account.iterdir())
        except OSError as exc:
            logger.warning("Could not read account directory %s: %s", account, exc)
            continue
        toons.extend(
            f"{account.name}/{child.name}"
            for child in children
            if child.is_dir() and _TOON_RE.match(child.name)
        )
    return toons


def choose_root(
    roots: list[Path],
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> Path:
    """Return the only root, or ask the operator to pick one.

    Invalid answers are asked again, forever.
    """
    if not roots:
        raise ResolutionError("no replay directories to choose from")
    if len(roots) == 1:
        return roots[0]

    line = "=" * _MENU_WIDTH
    output_fn(f"\n{line}")
    output_fn(
        "More than one possible replay directory was located while scanning\n"
        "for your StarCraft II installation's Accounts folder.\n\n"
        "Please select which directory should be watched below:\n"
    )
    for i, root in enumerate(roots, start=1):
        output_fn(f"  {i}: {root}")
    output_fn(line)

    while True:
        try:
            answer = input_fn(f"Your Choice [1-{len(roots)}]: ")
        except EOFError as exc:
            raise ResolutionError("no replay directory chosen: input closed") from exc
        try:
            choice = int(answer.strip())
        except ValueError:
            continue
        if 1 <= choice <= len(roots):
            return roots[choice - 1]


def resolve_replays_root(
    cfg: Config,
    scan_root: str | os.PathLike | None = None,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> Path:
    """Return the configured Accounts directory, scanning for one if needed.

    A newly found directory is saved to the configuration.
    """
    configured = cfg.replays_root
    if configured and os.path.isdir(configured):
        return Path(configured)

    logger.warning("Replay root not configured correctly, searching for replays directory...")
    logger.info("Determining replays directory... (this could take a few minutes)")

    scan_root = scan_root if scan_root is not None else get_scan_root()
    try:
        roots = find_replays_root(scan_root)
    except OSError as exc:
        raise ResolutionError(
            f"unable to automatically determine the path to your replays directory: {exc}"
        ) from exc
    if not roots:
        raise ResolutionError(
            "unable to automatically determine the path to your replays directory: "
            f"no StarCraft II Accounts folder below {scan_root}"
        )

    root = choose_root(roots, input_fn=input_fn, output_fn=output_fn)
    cfg.replays_root = root
    cfg.save()
    logger.info("Using replays directory: %s", root)
    return root


def get_watch_paths(
    cfg: Config,
    scan_root: str | os.PathLike | None = None,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> list[Path]:
    """Return the ``Replays/Multiplayer`` directory of every local profile."""
    root = resolve_replays_root(cfg, scan_root, input_fn=input_fn, output_fn=output_fn)

    toons = enumerate_accounts(root)
    logger.debug("account scan returned: %d toons", len(toons))

    paths = []
    for toon in toons:
        p = root.joinpath(*toon.split("/"), "Replays", "Multiplayer")
        if p.is_dir():
            paths.append(p)
    return paths
