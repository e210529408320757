"""
dirlens Walk: Raw directory entry reader.

Directory entries are read in bulk with the ``getdents64`` system call into
a reusable scratch buffer, then parsed record by record without any further
system call. Only entries whose type the kernel reports as ``DT_UNKNOWN``
cost one extra ``lstat``.

Each ``linux_dirent64`` record in the buffer is laid out as::

    d_ino     u64
    d_off     s64
    d_reclen  u16   length of this record, header included
    d_type    u8
    d_name    char[]  NUL terminated, padded to an 8 byte boundary

Platforms without ``getdents64`` use ``os.scandir``, which exposes the same
kernel type tags through ``DirEntry``.
"""

import ctypes
import os
import platform
import stat
import struct
import sys
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

from dirlens.core.constants import EntryType, Limits
from dirlens.core.errors import DirectoryReadError, DirentError
from dirlens.infrastructure.logger import get_logger

DEFAULT_SCRATCH_BUFFER_SIZE = Limits.DEFAULT_SCRATCH_BUFFER_SIZE
MINIMUM_SCRATCH_BUFFER_SIZE = Limits.MINIMUM_SCRATCH_BUFFER_SIZE

_DIRENT64_HEADER = struct.Struct("=QqHB")

# getdents64 syscall numbers by machine
_SYS_GETDENTS64 = {
    "x86_64": 217,
    "amd64": 217,
    "aarch64": 61,
    "arm64": 61,
    "riscv64": 61,
    "loongarch64": 61,
    "armv7l": 217,
    "armv6l": 217,
    "i386": 220,
    "i686": 220,
    "ppc64": 202,
    "ppc64le": 202,
    "s390x": 220,
}


@dataclass(frozen=True)
class Dirent:
    """A directory entry as reported by the bulk read: name and type tag."""

    name: str
    type: EntryType

    @property
    def is_dir(self) -> bool:
        return self.type is EntryType.DIRECTORY

    @property
    def is_regular(self) -> bool:
        return self.type is EntryType.REGULAR

    @property
    def is_symlink(self) -> bool:
        return self.type is EntryType.SYMLINK

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")

    @property
    def sort_key(self) -> bytes:
        """Byte-wise sort key of the name."""
        return os.fsencode(self.name)

    def __lt__(self, other: "Dirent") -> bool:
        return self.sort_key < other.sort_key


def new_dirent(path: str) -> Dirent:
    """Build a Dirent for ``path`` from a single lstat.

    Raises:
        DirectoryReadError: If the path cannot be lstat'ed
    """
    try:
        st = os.lstat(path)
    except OSError as e:
        raise DirectoryReadError.from_os_error(e, path, "lstat")
    return Dirent(os.path.basename(os.path.normpath(path)) or path, EntryType.from_mode(st.st_mode))


def ensure_scratch_buffer(scratch: Optional[bytearray] = None) -> bytearray:
    """Return ``scratch`` if usable, otherwise a fresh default-sized buffer."""
    if isinstance(scratch, bytearray) and len(scratch) >= MINIMUM_SCRATCH_BUFFER_SIZE:
        return scratch
    return bytearray(DEFAULT_SCRATCH_BUFFER_SIZE)


def parse_dirent_buffer(
    buf: Union[bytes, bytearray, memoryview], dirname: Optional[str] = None
) -> Iterator[Dirent]:
    """Parse consecutive ``linux_dirent64`` records out of ``buf``.

    Records with a zero inode, an empty name, ``.`` or ``..`` are skipped.
    Types the kernel did not report come back as ``EntryType.UNKNOWN``.

    Args:
        buf: Bytes filled by one getdents64 call
        dirname: Directory the buffer was read from (for error messages)

    Raises:
        DirentError: If a record header or length runs past the buffer
    """
    view = memoryview(buf)
    end = len(view)
    offset = 0

    while offset < end:
        if end - offset < _DIRENT64_HEADER.size:
            raise DirentError(
                f"truncated dirent header at offset {offset}", dirname, offset
            )
        ino, _, reclen, d_type = _DIRENT64_HEADER.unpack_from(view, offset)
        if reclen < _DIRENT64_HEADER.size or offset + reclen > end:
            raise DirentError(
                f"invalid dirent record length {reclen} at offset {offset}", dirname, offset
            )

        raw = bytes(view[offset + _DIRENT64_HEADER.size : offset + reclen])
        offset += reclen

        if ino == 0:
            continue
        nul = raw.find(b"\0")
        if nul >= 0:
            raw = raw[:nul]
        if raw in (b"", b".", b".."):
            continue

        yield Dirent(os.fsdecode(raw), EntryType.from_d_type(d_type))


class _Getdents64:
    """Thin ctypes binding for the getdents64 system call."""

    def __init__(self, number: int):
        self.number = number
        self._libc = ctypes.CDLL(None, use_errno=True)
        self._libc.syscall.restype = ctypes.c_long

    def __call__(self, fd: int, scratch: bytearray) -> int:
        buf = (ctypes.c_char * len(scratch)).from_buffer(scratch)
        try:
            n = self._libc.syscall(
                ctypes.c_long(self.number), ctypes.c_int(fd), buf, ctypes.c_uint(len(scratch))
            )
        finally:
            del buf
        if n < 0:
            err = ctypes.get_errno()
            raise OSError(err, os.strerror(err))
        return n


def _load_getdents64() -> Optional[_Getdents64]:
    if not sys.platform.startswith("linux"):
        return None
    number = _SYS_GETDENTS64.get(platform.machine().lower())
    if number is None:
        return None
    try:
        return _Getdents64(number)
    except (OSError, AttributeError):
        return None


_getdents64 = _load_getdents64()


def has_getdents64() -> bool:
    """Whether the raw bulk read is available on this platform."""
    return _getdents64 is not None


def _read_getdents(dirname: str, scratch: bytearray) -> List[Dirent]:
    flags = os.O_RDONLY | getattr(os, "O_DIRECTORY", 0) | getattr(os, "O_CLOEXEC", 0)
    try:
        fd = os.open(dirname, flags)
    except OSError as e:
        raise DirectoryReadError.from_os_error(e, dirname, "open")

    entries: List[Dirent] = []
    try:
        while True:
            try:
                n = _getdents64(fd, scratch)
            except OSError as e:
                raise DirectoryReadError.from_os_error(e, dirname, "read entries of")
            if n == 0:
                break
            entries.extend(parse_dirent_buffer(memoryview(scratch)[:n], dirname))
    finally:
        os.close(fd)
    return entries


def _read_scandir(dirname: str) -> List[Dirent]:
    entries: List[Dirent] = []
    try:
        with os.scandir(dirname) as it:
            for entry in it:
                if entry.is_symlink():
                    entry_type = EntryType.SYMLINK
                elif entry.is_dir(follow_symlinks=False):
                    entry_type = EntryType.DIRECTORY
                elif entry.is_file(follow_symlinks=False):
                    entry_type = EntryType.REGULAR
                else:
                    entry_type = EntryType.UNKNOWN
                entries.append(Dirent(entry.name, entry_type))
    except OSError as e:
        raise DirectoryReadError.from_os_error(e, dirname, "read entries of")
    return entries


def read_dirents(dirname: str, scratch: Optional[bytearray] = None) -> List[Dirent]:
    """Read every immediate entry of ``dirname``.

    The read is all-or-nothing: on any failure no partial result is
    returned. Entries come back in kernel order; callers sort if needed.

    Args:
        dirname: Directory to read (symlinks to directories are resolved)
        scratch: Optional scratch buffer, at least one page long

    Returns:
        List of Dirent, one per entry

    Raises:
        DirectoryReadError: If the directory cannot be opened or read
        DirentError: If the kernel buffer holds a malformed record
    """
    if _getdents64 is not None:
        entries = _read_getdents(dirname, ensure_scratch_buffer(scratch))
    else:
        entries = _read_scandir(dirname)

    resolved: List[Dirent] = []
    for entry in entries:
        if entry.type is EntryType.UNKNOWN:
            entry = _resolve_unknown(dirname, entry)
        resolved.append(entry)
    return resolved


def _resolve_unknown(dirname: str, entry: Dirent) -> Dirent:
    path = os.path.join(dirname, entry.name)
    try:
        mode = os.lstat(path).st_mode
    except OSError as e:
        raise DirectoryReadError.from_os_error(e, path, "lstat")
    get_logger().debug("Resolved untyped dirent", path=path, mode=stat.filemode(mode))
    return Dirent(entry.name, EntryType.from_mode(mode))


def read_dirnames(dirname: str, scratch: Optional[bytearray] = None) -> List[str]:
    """Names of the immediate entries of ``dirname`` (kernel order)."""
    return [entry.name for entry in read_dirents(dirname, scratch)]
