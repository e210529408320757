"""
dirlens Listing: Concurrent listing assembly.

One File is built per node, each on its own task in a thread pool. The
walker (or the single-level reader) only produces paths; the tasks stat,
classify and link them. A barrier waits for every task before anything is
returned, and the results are re-sorted so completion order never shows in
the output.

Example:
    >>> listing = build_listing("/srv/project")
    >>> [f.name for f in listing]
    ['docs', 'src', 'README.md', 'setup.py']
"""

import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from dirlens.core.constants import DEFAULT_CONFIG, ConfigKey
from dirlens.core.errors import DirlensError
from dirlens.infrastructure.config_manager import ConfigManager
from dirlens.infrastructure.logger import get_logger
from dirlens.listing.file import File, make_file
from dirlens.listing.files import Files
from dirlens.mime import Detector, get_detector
from dirlens.walk import Dirent, WalkOptions, read_dirnames, walk

_DEFAULTS = DEFAULT_CONFIG[ConfigKey.LISTING]


@dataclass
class ListingOptions:
    """
    Parameters of a listing.

    Attributes:
        include_folders: Keep directories in the result
        include_files: Keep non-directories in the result
        include_hidden: Keep entries whose name starts with "."
        recursive: List the whole subtree instead of one level
        disk_usage: Compute recursive directory sizes
        follow_symlinks: Recurse through symlinked directories (recursive mode)
        ignore: Names dropped from the result
        ignore_recursive: Directory names never descended into
        max_workers: Thread pool size (None: the ThreadPoolExecutor default,
            min(32, os.cpu_count() + 4))
        detector: Content classifier (default: the shared detector)
    """

    include_folders: bool = True
    include_files: bool = True
    include_hidden: bool = False
    recursive: bool = False
    disk_usage: bool = False
    follow_symlinks: bool = False
    ignore: Tuple[str, ...] = tuple(_DEFAULTS[ConfigKey.IGNORE])
    ignore_recursive: Tuple[str, ...] = tuple(_DEFAULTS[ConfigKey.IGNORE_RECURSIVE])
    max_workers: Optional[int] = None
    detector: Optional[Detector] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_dict(cls, listing: Dict[str, Any]) -> "ListingOptions":
        """Build options from a ``listing`` configuration section."""
        values = dict(_DEFAULTS)
        values.update(listing)
        return cls(
            include_folders=bool(values[ConfigKey.INCLUDE_FOLDERS]),
            include_files=bool(values[ConfigKey.INCLUDE_FILES]),
            include_hidden=bool(values[ConfigKey.INCLUDE_HIDDEN]),
            recursive=bool(values[ConfigKey.RECURSIVE]),
            disk_usage=bool(values[ConfigKey.DISK_USAGE]),
            follow_symlinks=bool(values[ConfigKey.FOLLOW_SYMLINKS]),
            ignore=tuple(values[ConfigKey.IGNORE] or ()),
            ignore_recursive=tuple(values[ConfigKey.IGNORE_RECURSIVE] or ()),
            max_workers=values[ConfigKey.MAX_WORKERS],
        )

    @classmethod
    def from_config(cls, config: ConfigManager) -> "ListingOptions":
        """Build options from the merged configuration.

        Raises:
            ConfigError: If the listing section is invalid
        """
        config.validate()
        return cls.from_dict(config.section(ConfigKey.LISTING))


class _Accumulator:
    """Collects Files from concurrent tasks."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._files: List[File] = []

    def add(self, file: File) -> None:
        with self._lock:
            self._files.append(file)

    def files(self) -> List[File]:
        with self._lock:
            return list(self._files)


def _byte_order(file: File) -> bytes:
    return os.fsencode(file.sort)


def file_list(directory: str, recursive: bool, options: Optional[ListingOptions] = None) -> List[File]:
    """
    Build one File per entry of ``directory``, concurrently.

    In recursive mode every node below ``directory`` is included (the
    directory itself is not) and each File's sort key is its path relative
    to ``directory``. Nodes that cannot be described, for instance because
    they vanished between enumeration and stat, are dropped.

    Returns:
        Files in completion order

    Raises:
        DirectoryReadError: If ``directory`` cannot be read
        WalkError: If the recursive walk fails
    """
    options = options or ListingOptions()
    directory = os.path.abspath(directory)
    detector = options.detector or get_detector()
    accumulator = _Accumulator()
    logger = get_logger()

    def build(path: str) -> None:
        try:
            file = make_file(path, options.disk_usage, detector)
        except OSError as e:
            logger.debug("Dropping node", path=path, error=e.strerror or str(e))
            return
        except DirlensError as e:
            logger.debug("Dropping node", path=path, error=e.message)
            return
        if recursive:
            file.sort = os.path.relpath(path, directory)
        accumulator.add(file)

    futures: List[Future] = []
    with ThreadPoolExecutor(
        max_workers=options.max_workers, thread_name_prefix="dirlens-listing"
    ) as executor:
        if recursive:

            def submit(path: str, dirent: Dirent) -> None:
                if path != directory:
                    futures.append(executor.submit(build, path))

            walk(
                directory,
                submit,
                WalkOptions(
                    follow_symlinks=options.follow_symlinks,
                    no_hidden=not options.include_hidden,
                    ignore=options.ignore_recursive,
                    unsorted=True,
                ),
            )
        else:
            for name in read_dirnames(directory):
                futures.append(executor.submit(build, os.path.join(directory, name)))

        wait(futures)

    for future in futures:
        error = future.exception()
        if error is not None:
            raise error

    return accumulator.files()


def build_listing(
    directory: str,
    recursive: bool = False,
    include_folders: bool = True,
    include_files: bool = True,
    include_hidden: bool = False,
    options: Optional[ListingOptions] = None,
) -> Files:
    """
    List ``directory`` into an ordered, numbered collection.

    Folders come first, then files, each group stably sorted by its sort
    key. Hidden entries are removed unless ``include_hidden``; names on the
    ignore list are removed always. Ordinals run ``0..N-1``.

    Args:
        directory: Directory to list
        recursive: Include the whole subtree
        include_folders: Keep directories
        include_files: Keep non-directories
        include_hidden: Keep dot entries (and descend into dot directories)
        options: Ignore lists, disk usage, symlink policy and pool size

    Raises:
        DirectoryReadError: If ``directory`` cannot be read
        WalkConfigurationError: If a recursive listing root is not a directory
    """
    base = options or ListingOptions()
    options = replace(
        base,
        include_folders=include_folders,
        include_files=include_files,
        include_hidden=include_hidden,
        recursive=recursive,
    )

    with get_logger().add_context(directory=directory, recursive=recursive):
        entries = file_list(directory, recursive, options)

        folders = sorted((f for f in entries if f.is_dir), key=_byte_order)
        files = sorted((f for f in entries if not f.is_dir), key=_byte_order)

        chosen: List[File] = []
        if include_folders:
            chosen.extend(folders)
        if include_files:
            chosen.extend(files)
        if not include_hidden:
            chosen = [f for f in chosen if not f.hidden]
        ignored = frozenset(options.ignore)
        if ignored:
            chosen = [f for f in chosen if f.name not in ignored]

        listing = Files(chosen).number()
        get_logger().debug(
            "Listing built", entries=len(entries), listed=len(listing)
        )
    return listing


def list_directory(directory: str, options: Optional[ListingOptions] = None) -> Files:
    """``build_listing`` driven entirely by ``options``."""
    options = options or ListingOptions()
    return build_listing(
        directory,
        recursive=options.recursive,
        include_folders=options.include_folders,
        include_files=options.include_files,
        include_hidden=options.include_hidden,
        options=options,
    )
