"""
dirlens Listing: Per-entry metadata record.

A ``File`` is built for exactly one path. Identity, hierarchy,
classification and stat facts are computed once at construction; the
transient fields (ordinal, selection, cursor) and the search scratch fields
belong to whoever holds the listing.
"""

import os
import stat
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from dirlens.core.constants import FOLDER_MIME, OCTET_STREAM, EntryType
from dirlens.core.errors import DirectoryReadError
from dirlens.infrastructure.logger import get_logger
from dirlens.listing import sizes
from dirlens.mime import Detector, get_detector, icon_for
from dirlens.walk import read_dirnames


@dataclass
class File:
    """
    Metadata of one filesystem entry.

    Attributes:
        path: Absolute path
        name: Base name ("/" for the filesystem root)
        sort: Sort key (the name, or the relative path in recursive listings)
        entry_type: Type of the entry itself (from lstat)
        is_dir: Whether the entry, or the target of a symlink, is a directory
        mode: st_mode of the entry (of the target for symlinks)
        size: Size in bytes; for directories 0 unless disk usage was requested
        size_iec: Human readable size ("1.5 KiB")
        created: Modification time, used as the date sort key
        accessed: Last access time
        changed: Last status change time
        mime: MIME type ("folder/folder" for directories)
        extension: Extension of the name including the dot, empty if none
        icon: Display glyph
        parent, parent_path: Containing directory
        children, children_paths: Immediate entries (directories only)
        siblings, sibling_paths: Entries of the parent, this one included
        ancestors, ancestor_paths: From "/" down to the parent
        number: Ordinal in the current listing
        total: Size of the current listing
        selected, active: Selection and cursor flags
        ignore: Some ancestor directory name starts with "."
        hidden: The name starts with "."
        map_line: Matched lines by line number (content search)
        num_lines: Line count (content search)
    """

    path: str
    name: str
    sort: str
    entry_type: EntryType
    is_dir: bool
    mode: int
    size: int
    size_iec: str
    created: datetime
    accessed: datetime
    changed: datetime
    mime: str
    extension: str
    icon: str
    parent: str
    parent_path: str
    children: List[str] = field(default_factory=list)
    children_paths: List[str] = field(default_factory=list)
    siblings: List[str] = field(default_factory=list)
    sibling_paths: List[str] = field(default_factory=list)
    ancestors: List[str] = field(default_factory=list)
    ancestor_paths: List[str] = field(default_factory=list)

    number: int = 0
    total: int = 0
    selected: bool = False
    active: bool = False
    ignore: bool = False
    hidden: bool = False

    map_line: Dict[int, str] = field(default_factory=dict)
    num_lines: int = 0

    @property
    def children_nr(self) -> int:
        return len(self.children)

    @property
    def sibling_nr(self) -> int:
        return len(self.siblings)

    @property
    def ancestor_nr(self) -> int:
        return len(self.ancestors)

    @property
    def is_symlink(self) -> bool:
        return self.entry_type is EntryType.SYMLINK

    @property
    def permissions(self) -> str:
        """``ls -l`` style mode string."""
        return stat.filemode(self.mode)


def base_name(path: str) -> str:
    """Base name of ``path``; the root keeps the name "/"."""
    return os.path.basename(path.rstrip("/")) or "/"


def parent_info(path: str) -> Tuple[str, str]:
    """Return ``(parent_name, parent_path)``. The root is its own parent."""
    path = os.path.normpath(path)
    if path == "/":
        return "/", "/"
    parent_path = os.path.dirname(path) or "/"
    return base_name(parent_path), parent_path


def ancestor_paths(directory: str) -> List[str]:
    """Paths from "/" down to ``directory`` inclusive."""
    paths = ["/"]
    current = ""
    for part in directory.split("/"):
        if not part:
            continue
        current += "/" + part
        paths.append(current)
    return paths


def entry_paths(directory: str) -> List[str]:
    """Sorted paths of the immediate entries of ``directory``.

    An unreadable directory yields no entries.
    """
    try:
        names = read_dirnames(directory)
    except DirectoryReadError as e:
        get_logger().debug("Cannot list entries", path=directory, error=e.message)
        return []
    names.sort(key=os.fsencode)
    return [os.path.join(directory, name) for name in names]


def make_file(
    path: str,
    disk_usage: bool = False,
    detector: Optional[Detector] = None,
) -> File:
    """
    Build the File record for ``path``.

    Args:
        path: Entry to describe; made absolute
        disk_usage: Compute recursive sizes for directories
        detector: Content classifier (default: the shared detector)

    Returns:
        Fully populated File with default transient fields

    Raises:
        OSError: If the entry cannot be lstat'ed (missing, vanished)
    """
    path = os.path.abspath(path)
    lst = os.lstat(path)
    entry_type = EntryType.from_mode(lst.st_mode)

    st = lst
    if entry_type is EntryType.SYMLINK:
        try:
            st = os.stat(path)
        except OSError:
            # dangling link
            st = lst

    name = base_name(path)
    parent, parent_path = parent_info(path)
    is_dir = stat.S_ISDIR(st.st_mode)

    children_paths: List[str] = []
    if is_dir:
        size = sizes.disk_usage(path) if disk_usage else 0
        mime, extension = FOLDER_MIME, ""
        children_paths = entry_paths(path)
    else:
        size = st.st_size
        extension = os.path.splitext(name)[1]
        if stat.S_ISREG(st.st_mode):
            mime, _ = (detector or get_detector()).detect_file_safe(path)
        else:
            mime = OCTET_STREAM

    sibling_paths = entry_paths(parent_path)
    ancestors_paths = ancestor_paths(parent_path)
    ancestors = [base_name(p) for p in ancestors_paths]

    return File(
        path=path,
        name=name,
        sort=name,
        entry_type=entry_type,
        is_dir=is_dir,
        mode=st.st_mode,
        size=size,
        size_iec=sizes.byte_count_iec(size),
        created=datetime.fromtimestamp(st.st_mtime),
        accessed=datetime.fromtimestamp(st.st_atime),
        changed=datetime.fromtimestamp(st.st_ctime),
        mime=mime,
        extension=extension,
        icon=icon_for(extension, is_dir),
        parent=parent,
        parent_path=parent_path,
        children=[base_name(p) for p in children_paths],
        children_paths=children_paths,
        siblings=[base_name(p) for p in sibling_paths],
        sibling_paths=sibling_paths,
        ancestors=ancestors,
        ancestor_paths=ancestors_paths,
        ignore=any(a.startswith(".") for a in ancestors),
        hidden=name.startswith("."),
    )


def make_files(*paths: str, disk_usage: bool = False) -> "Files":
    """Build Files for explicit paths, in the given order.

    Raises:
        OSError: For the first path that cannot be described
    """
    from dirlens.listing.files import Files

    return Files(make_file(path, disk_usage) for path in paths)
