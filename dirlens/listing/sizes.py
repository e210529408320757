"""
dirlens Listing: Size formatting and disk usage.
"""

import os

from dirlens.core.errors import WalkError
from dirlens.infrastructure.logger import get_logger
from dirlens.walk import Dirent, WalkOptions, skip_on_error, walk


def _byte_count(size: int, unit: int, prefixes: str, suffix: str) -> str:
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {prefixes[exp]}{suffix}"


def byte_count_iec(size: int) -> str:
    """Format ``size`` with binary prefixes: ``1536 -> "1.5 KiB"``."""
    return _byte_count(size, 1024, "KMGTPE", "iB")


def byte_count_si(size: int) -> str:
    """Format ``size`` with decimal prefixes: ``1500 -> "1.5 kB"``."""
    return _byte_count(size, 1000, "kMGTPE", "B")


def disk_usage(path: str) -> int:
    """Sum of the sizes of all regular files below ``path``.

    Symlinks are neither followed nor counted, so a symlink to a directory
    measures 0. Unreadable subdirectories and files that vanish during the
    walk are skipped; if ``path`` itself cannot be walked the total gathered
    so far is returned.
    """
    total = 0

    def add(node_path: str, dirent: Dirent) -> None:
        nonlocal total
        if dirent.is_regular:
            total += os.lstat(node_path).st_size

    try:
        walk(path, add, WalkOptions(unsorted=True, error_callback=skip_on_error))
    except WalkError as e:
        get_logger().debug("Cannot measure disk usage", path=path, error=e.message)
    return total
