"""
dirlens Walk - Raw directory reading and recursive traversal.

Public API:
-----------

Reader:
    Dirent: Name and type tag of one directory entry
    read_dirents: Bulk-read the entries of one directory
    read_dirnames: Names only
    new_dirent: Dirent for a single path (one lstat)
    parse_dirent_buffer: Parse a getdents64 buffer

Walker:
    walk: Visit every node below a root directory
    WalkOptions: Traversal parameters
    ErrorAction: HALT or SKIP_NODE answer of an error callback
"""

from dirlens.walk.dirent import (
    DEFAULT_SCRATCH_BUFFER_SIZE,
    MINIMUM_SCRATCH_BUFFER_SIZE,
    Dirent,
    ensure_scratch_buffer,
    has_getdents64,
    new_dirent,
    parse_dirent_buffer,
    read_dirents,
    read_dirnames,
)
from dirlens.walk.walker import (
    ErrorAction,
    WalkOptions,
    halt_on_error,
    skip_on_error,
    walk,
)

__all__ = [
    "DEFAULT_SCRATCH_BUFFER_SIZE",
    "MINIMUM_SCRATCH_BUFFER_SIZE",
    "Dirent",
    "ensure_scratch_buffer",
    "has_getdents64",
    "new_dirent",
    "parse_dirent_buffer",
    "read_dirents",
    "read_dirnames",
    "ErrorAction",
    "WalkOptions",
    "halt_on_error",
    "skip_on_error",
    "walk",
]
