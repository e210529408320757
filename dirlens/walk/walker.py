"""
dirlens Walk: Recursive directory traversal.

The walker visits every node below a root directory, reading each directory
level with the raw entry reader. A callback is invoked for every node,
parents always before their children.

Example:
    >>> seen = []
    >>> walk("/srv/project", lambda path, de: seen.append(path),
    ...      WalkOptions(ignore=("node_modules", ".git")))

Control flow:
    - A callback raising ``SkipDir`` prunes the branch: a directory's
      subtree is not visited; on a non-directory the remaining siblings
      are skipped. ``SkipDir`` at the root is silenced.
    - Any other callback exception, and any failure to read a directory,
      is wrapped in ``WalkError`` and handed to ``error_callback``, which
      answers ``ErrorAction.HALT`` (abort, re-raise) or
      ``ErrorAction.SKIP_NODE`` (continue with the next node).
"""

import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Collection, Optional, Set, Tuple

from dirlens.core.constants import EntryType
from dirlens.core.errors import (
    DirectoryReadError,
    SkipDir,
    WalkConfigurationError,
    WalkError,
)
from dirlens.infrastructure.logger import get_logger
from dirlens.walk.dirent import Dirent, ensure_scratch_buffer, read_dirents


class ErrorAction(Enum):
    """Decision taken by an error callback."""

    HALT = "halt"  # Abort the whole walk
    SKIP_NODE = "skip_node"  # Log and continue


WalkFunc = Callable[[str, Dirent], None]
ErrorFunc = Callable[[str, WalkError], ErrorAction]


def halt_on_error(path: str, error: WalkError) -> ErrorAction:
    """Default error callback: every error aborts the walk."""
    return ErrorAction.HALT


def skip_on_error(path: str, error: WalkError) -> ErrorAction:
    """Error callback that logs and skips every failing node."""
    get_logger().debug("Skipping node", path=path, error=error.message)
    return ErrorAction.SKIP_NODE


@dataclass
class WalkOptions:
    """Parameters controlling a walk.

    Attributes:
        follow_symlinks: Recurse into symlinks that refer to directories.
            Symlinks are always reported to the callback.
        no_hidden: Do not recurse into directories whose name starts with "."
        ignore: Directory names never recursed into (still reported)
        unsorted: Visit children in kernel order instead of byte-wise order
        error_callback: Decides what to do with recoverable errors
        post_children_callback: Called after a directory's subtree is done
        scratch_buffer: Reusable buffer for the raw directory reads
    """

    follow_symlinks: bool = False
    no_hidden: bool = False
    ignore: Collection[str] = ()
    unsorted: bool = False
    error_callback: Optional[ErrorFunc] = None
    post_children_callback: Optional[WalkFunc] = None
    scratch_buffer: Optional[bytearray] = None


class _Walker:
    def __init__(self, root: str, callback: WalkFunc, options: WalkOptions):
        self.root = root
        self.callback = callback
        self.options = options
        self.ignore = frozenset(options.ignore)
        self.error_callback = options.error_callback or halt_on_error
        self.scratch = ensure_scratch_buffer(options.scratch_buffer)
        # (st_dev, st_ino) of the directories on the current path
        self.active: Set[Tuple[int, int]] = set()

    def recover(self, path: str, error: WalkError) -> None:
        """Let the error callback decide; re-raise on HALT."""
        if self.error_callback(path, error) is ErrorAction.SKIP_NODE:
            return
        raise error

    def resolve(self, path: str, dirent: Dirent) -> Optional[bool]:
        """Whether ``dirent`` should be treated as a directory.

        Returns None when resolving a symlink failed and the node was skipped.
        """
        if dirent.is_dir:
            return True
        if not (dirent.is_symlink and self.options.follow_symlinks):
            return False
        try:
            return stat.S_ISDIR(os.stat(path).st_mode)
        except OSError as e:
            self.recover(path, WalkError(f"cannot stat symlink target of {path}", path, e))
            return None

    def visit(self, path: str, dirent: Dirent) -> None:
        """Visit one node and, for directories, its subtree.

        Raises:
            SkipDir: Propagated to the parent so it can prune
            WalkError: On a fatal error
        """
        try:
            self.callback(path, dirent)
        except SkipDir:
            raise
        except WalkError as e:
            self.recover(path, e)
            return
        except Exception as e:
            self.recover(path, WalkError(f"callback failed for {path}: {e}", path, e))
            return

        is_dir = self.resolve(path, dirent)
        if not is_dir:
            return
        if path != self.root:
            if self.options.no_hidden and dirent.is_hidden:
                return
            if dirent.name in self.ignore:
                return

        if not self.options.follow_symlinks:
            self.visit_children(path)
        else:
            key = self.identity(path)
            if key is None:
                return
            if key in self.active:
                get_logger().debug("Skipping directory cycle", path=path)
                return
            self.active.add(key)
            try:
                self.visit_children(path)
            finally:
                self.active.discard(key)

        if self.options.post_children_callback is None:
            return
        try:
            self.options.post_children_callback(path, dirent)
        except SkipDir:
            raise
        except WalkError as e:
            self.recover(path, e)
        except Exception as e:
            self.recover(path, WalkError(f"post-children callback failed for {path}: {e}", path, e))

    def identity(self, path: str) -> Optional[Tuple[int, int]]:
        try:
            st = os.stat(path)
        except OSError as e:
            self.recover(path, WalkError(f"cannot stat {path}: {e.strerror or e}", path, e))
            return None
        return (st.st_dev, st.st_ino)

    def visit_children(self, path: str) -> None:
        try:
            children = read_dirents(path, self.scratch)
        except DirectoryReadError as e:
            self.recover(path, WalkError(e.message, path, e, e.error_code))
            return

        if not self.options.unsorted:
            children.sort()

        for child in children:
            child_path = os.path.join(path, child.name)
            try:
                self.visit(child_path, child)
            except SkipDir:
                is_dir = self.resolve(child_path, child)
                if is_dir is None:
                    continue
                if not is_dir:
                    return


def walk(root: str, callback: WalkFunc, options: Optional[WalkOptions] = None) -> None:
    """Walk the tree rooted at ``root``, calling ``callback`` for every node.

    The root itself is visited first. Children of any one directory are
    visited in byte-wise lexical order of their names unless
    ``options.unsorted`` is set.

    Args:
        root: Directory to walk
        callback: Invoked as ``callback(path, dirent)`` for every node
        options: Walk parameters (defaults: no symlink following, sorted)

    Raises:
        WalkConfigurationError: If ``root`` is missing or not a directory
        WalkError: If an error is not demoted to SKIP_NODE by the error callback
        DirentError: If a raw directory record is malformed
    """
    options = options or WalkOptions()
    root = os.path.normpath(root)

    try:
        st = os.stat(root) if options.follow_symlinks else os.lstat(root)
    except OSError as e:
        raise WalkConfigurationError(f"cannot stat walk root {root}: {e.strerror or e}", root)

    entry_type = EntryType.from_mode(st.st_mode)
    if entry_type is not EntryType.DIRECTORY:
        raise WalkConfigurationError(f"cannot walk non-directory: {root}", root)

    dirent = Dirent(os.path.basename(root) or root, entry_type)
    try:
        _Walker(root, callback, options).visit(root, dirent)
    except SkipDir:
        pass
