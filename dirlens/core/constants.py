"""
dirlens Core: Constants and Type Definitions

This module provides system-wide constants, error codes, and type definitions
shared by the reader, walker, classifier and listing layers.
"""
import mmap
import stat
from enum import Enum, IntEnum
from typing import Optional

# Version information
DIRLENS_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for dirlens operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad path, invalid configuration
    NOT_FOUND = 2  # File or directory doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    IO_ERROR = 4  # Read failed mid-stream
    MALFORMED = 5  # Raw directory record could not be parsed
    INTERNAL_ERROR = 6  # Bug in dirlens

    @classmethod
    def from_errno(cls, err: Optional[int]) -> "ErrorCode":
        """Map an OS errno to the closest error code."""
        import errno

        if err == errno.ENOENT:
            return cls.NOT_FOUND
        if err in (errno.EACCES, errno.EPERM):
            return cls.PERMISSION_DENIED
        if err in (errno.ENOTDIR, errno.EINVAL):
            return cls.INVALID_INPUT
        return cls.IO_ERROR


class Limits:
    """Buffer sizes and read limits."""

    # Scratch buffer handed to the bulk directory read
    DEFAULT_SCRATCH_BUFFER_SIZE = 64 * 1024
    MINIMUM_SCRATCH_BUFFER_SIZE = mmap.PAGESIZE

    # Prefix inspected by the content classifier
    READ_LIMIT = 520

    # Matroska doctype search window
    MATROSKA_SEARCH_LIMIT = 4096


class EntryType(Enum):
    """Type tag of a directory entry."""

    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    BLOCK_DEVICE = "block"
    CHARACTER_DEVICE = "char"
    FIFO = "fifo"
    SOCKET = "socket"
    UNKNOWN = "unknown"

    @classmethod
    def from_mode(cls, mode: int) -> "EntryType":
        """Determine entry type from a stat mode."""
        if stat.S_ISREG(mode):
            return cls.REGULAR
        elif stat.S_ISDIR(mode):
            return cls.DIRECTORY
        elif stat.S_ISLNK(mode):
            return cls.SYMLINK
        elif stat.S_ISBLK(mode):
            return cls.BLOCK_DEVICE
        elif stat.S_ISCHR(mode):
            return cls.CHARACTER_DEVICE
        elif stat.S_ISFIFO(mode):
            return cls.FIFO
        elif stat.S_ISSOCK(mode):
            return cls.SOCKET
        else:
            return cls.UNKNOWN

    @classmethod
    def from_d_type(cls, d_type: int) -> "EntryType":
        """Determine entry type from a ``d_type`` byte of a raw dirent."""
        return _D_TYPES.get(d_type, cls.UNKNOWN)


# d_type values from <dirent.h>
DT_UNKNOWN = 0
DT_FIFO = 1
DT_CHR = 2
DT_DIR = 4
DT_BLK = 6
DT_REG = 8
DT_LNK = 10
DT_SOCK = 12

_D_TYPES = {
    DT_FIFO: EntryType.FIFO,
    DT_CHR: EntryType.CHARACTER_DEVICE,
    DT_DIR: EntryType.DIRECTORY,
    DT_BLK: EntryType.BLOCK_DEVICE,
    DT_REG: EntryType.REGULAR,
    DT_LNK: EntryType.SYMLINK,
    DT_SOCK: EntryType.SOCKET,
}


# Classification of directories and the fallback root match
FOLDER_MIME = "folder/folder"
DEFAULT_CATEGORY = "file/default"
OCTET_STREAM = "application/octet-stream"


class ConfigKey:
    """Configuration key constants."""

    ROOT = "dirlens"
    LISTING = "listing"
    LOGGING = "logging"

    INCLUDE_FOLDERS = "include_folders"
    INCLUDE_FILES = "include_files"
    INCLUDE_HIDDEN = "include_hidden"
    RECURSIVE = "recursive"
    DISK_USAGE = "disk_usage"
    FOLLOW_SYMLINKS = "follow_symlinks"
    IGNORE = "ignore"
    IGNORE_RECURSIVE = "ignore_recursive"
    MAX_WORKERS = "max_workers"
    FORMAT = "format"


DEFAULT_FORMAT = "{{ '%3d' % file.number }} {{ file.icon }} {{ file.name }}"

# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.LISTING: {
        ConfigKey.INCLUDE_FOLDERS: True,
        ConfigKey.INCLUDE_FILES: True,
        ConfigKey.INCLUDE_HIDDEN: False,
        ConfigKey.RECURSIVE: False,
        ConfigKey.DISK_USAGE: False,
        ConfigKey.FOLLOW_SYMLINKS: False,
        ConfigKey.IGNORE: [".git"],
        ConfigKey.IGNORE_RECURSIVE: ["node_modules", ".git"],
        ConfigKey.MAX_WORKERS: None,
        ConfigKey.FORMAT: DEFAULT_FORMAT,
    },
    ConfigKey.LOGGING: {
        "level": "WARNING",
        "file": None,
    },
}
