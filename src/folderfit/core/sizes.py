"""
Size source for the selector.

Computes the byte size of each requested file or folder. Inaccessible
entries contribute zero bytes instead of failing the whole run.
"""

import logging
import stat
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

WILDCARD = "*"


def size_of(path: str | Path) -> int:
    """
    Compute the total size of a file or directory in bytes.

    Directories are summed with an explicit stack, so deep trees cannot
    exhaust the interpreter stack. Symbolic links are followed; each
    directory is counted once, keyed by device and inode, which also
    breaks link cycles.

    Args:
        path: File or directory to measure.

    Returns:
        Size in bytes. Entries that cannot be accessed count as 0.
    """
    total = 0
    visited: set[tuple[int, int]] = set()
    pending = [Path(path)]
    while pending:
        current = pending.pop()
        try:
            info = current.stat()
            if not stat.S_ISDIR(info.st_mode):
                total += info.st_size
                continue
            key = (info.st_dev, info.st_ino)
            if key in visited:
                logger.debug("Already counted %s", current)
                continue
            visited.add(key)
            pending.extend(list(current.iterdir()))
        except OSError as exc:
            logger.debug("Cannot access %s: %s", current, exc)
    return total


def list_entries(directory: str | Path = ".") -> list[str]:
    """
    List the files and folders directly inside a directory.

    Args:
        directory: Directory to list.

    Returns:
        Sorted entry paths, empty if the directory cannot be read.
    """
    directory = Path(directory)
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        logger.debug("Cannot list %s: %s", directory, exc)
        return []
    if str(directory) == ".":
        return [entry.name for entry in entries]
    return [str(entry) for entry in entries]


def expand_sources(sources: Iterable[str], cwd: str | Path = ".") -> list[str]:
    """
    Expand the source arguments given on the command line.

    A bare ``*`` stands for every entry of ``cwd``. Duplicate sources
    are dropped, keeping the first occurrence.
    """
    expanded: list[str] = []
    seen: set[str] = set()
    for source in sources:
        names = list_entries(cwd) if source == WILDCARD else [source]
        for name in names:
            if name not in seen:
                seen.add(name)
                expanded.append(name)
    return expanded


def compute_sizes(sources: Iterable[str]) -> dict[str, int]:
    """Map each source to its total size in bytes."""
    sizes: dict[str, int] = {}
    for source in sources:
        sizes[source] = size_of(source)
        logger.debug("Measured %s: %d bytes", source, sizes[source])
    return sizes
