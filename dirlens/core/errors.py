"""
dirlens Core: Exception hierarchy.

Enumeration and configuration errors propagate to the caller of a listing
or walk. Per-node stat and classification errors are absorbed by the
listing layer and never surface through these types.
"""
from typing import Optional

from dirlens.core.constants import ErrorCode


class DirlensError(Exception):
    """Base exception for dirlens errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        path: Optional[str] = None,
    ):
        """Initialize DirlensError.

        Args:
            message: Error message
            error_code: Associated error code
            path: Filesystem path the error relates to, if any
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.path = path


class DirectoryReadError(DirlensError):
    """A directory could not be opened or its entries could not be read."""

    @classmethod
    def from_os_error(cls, exc: OSError, path: str, action: str) -> "DirectoryReadError":
        error = cls(
            f"cannot {action} {path}: {exc.strerror or exc}",
            ErrorCode.from_errno(exc.errno),
            path,
        )
        error.errno = exc.errno
        return error


class DirentError(DirlensError):
    """A raw directory record is malformed."""

    def __init__(self, message: str, path: Optional[str] = None, offset: int = 0):
        super().__init__(message, ErrorCode.MALFORMED, path)
        self.offset = offset


class WalkError(DirlensError):
    """Error raised while walking a directory tree."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
        error_code: ErrorCode = ErrorCode.IO_ERROR,
    ):
        super().__init__(message, error_code, path)
        self.cause = cause


class WalkConfigurationError(WalkError):
    """The walk was configured with an unusable root."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, path, error_code=ErrorCode.INVALID_INPUT)


class DetectionError(DirlensError):
    """Content could not be read for classification.

    Carries the fallback classification so callers can still use it.
    """

    def __init__(self, message: str, mime: str, extension: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.IO_ERROR, path)
        self.mime = mime
        self.extension = extension


class SkipDir(Exception):
    """Raised by a walk callback to prune the current branch.

    On a directory the subtree is not visited; on any other node the
    remaining siblings in the same directory are skipped.
    """
