"""Small path helpers."""

import os


def split_filepath(path: str | os.PathLike) -> tuple[str, str, str]:
    """Split *path* into ``(directory, name, extension)``.

    The name carries no extension and the extension keeps its leading dot,
    so ``/r/Ever Dream LE.SC2Replay`` gives
    ``("/r", "Ever Dream LE", ".SC2Replay")``.  For a replay the name is the
    map it was played on, which is what every log line shows.
    """
    directory, filename = os.path.split(os.fspath(path))
    name, ext = os.path.splitext(filename)
    return directory, name, ext
