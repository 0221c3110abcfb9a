"""Recursive directory traversal."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import FrozenSet, Generator, Union

logger = logging.getLogger(__name__)


def _log_walk_error(error: OSError) -> None:
    logger.error("error while walking tree: %s", error)


def walk_files(root: Union[str, Path]) -> Generator[Path, None, None]:
    """Yield every file beneath ``root``, following symbolic links.

    A directory reached through several links is walked once per path. Only a
    link back into one of its own ancestors is skipped, which ends cycles.
    Directories that cannot be listed are logged and skipped; the walk carries
    on with their siblings. A missing root yields nothing.
    """

    yield from _walk(Path(root), frozenset())


def _walk(directory: Path, ancestors: FrozenSet[str]) -> Generator[Path, None, None]:
    real = os.path.realpath(directory)
    if real in ancestors:
        logger.debug("skipping symlink cycle at %s", directory)
        return
    try:
        with os.scandir(directory) as listing:
            entries = list(listing)
    except OSError as exc:
        _log_walk_error(exc)
        return

    subdirectories = []
    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False
        if is_dir:
            subdirectories.append(directory / entry.name)
        else:
            yield directory / entry.name

    chain = ancestors | {real}
    for subdirectory in subdirectories:
        yield from _walk(subdirectory, chain)
