"""Filesystem walk that discovers repository roots."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

CONTROL_DIR = ".git"


def find_repositories(start_dir: Path | str = ".") -> Iterator[Path]:
    """Yield the parent of every ``.git`` entry below ``start_dir``.

    The walk is depth-first in name order and follows symbolic links; a
    directory reached twice through links is visited once. ``.git`` entries
    may be directories or gitfiles, and are never descended into.
    """
    start = Path(start_dir)
    seen: set[str] = set()

    def _on_error(error: OSError) -> None:
        logger.debug("skipping unreadable directory %s: %s", error.filename, error.strerror)

    for dirpath, dirnames, filenames in os.walk(start, onerror=_on_error, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in seen:
            logger.debug("skipping %s: already visited as %s", dirpath, real)
            dirnames[:] = []
            continue
        seen.add(real)

        if CONTROL_DIR in dirnames or CONTROL_DIR in filenames:
            yield Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if d != CONTROL_DIR)
