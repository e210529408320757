"""
dirlens Mime: Default matcher tree and detector.

The tree is assembled once by ``build_tree`` and is immutable afterwards, so
it is safe to share between the worker threads of a listing.

Example:
    >>> detector = Detector()
    >>> detector.detect(b"\\x89PNG\\r\\n\\x1a\\n....")
    ('image/png', 'png')
    >>> detector.detect_file("/etc/hostname")
    ('text/plain', 'txt')
"""

import functools
from typing import BinaryIO, Optional, Tuple

from dirlens.core.constants import OCTET_STREAM, Limits
from dirlens.core.errors import DetectionError
from dirlens.mime import matchers as m
from dirlens.mime.node import Node

READ_LIMIT = Limits.READ_LIMIT

Classification = Tuple[str, str]


def _leaf(mime: str, extension: str) -> Node:
    """Subtype recognised by name only; its predicate never matches."""
    return Node(mime, extension, m.never)


def build_tree(read_limit: int = READ_LIMIT) -> Node:
    """Construct the default classifier tree.

    ``read_limit`` is the sniff length the tree will be fed; JSON cut at that
    length is accepted as a prefix.

    Siblings are listed in priority order: when two of them accept the same
    input the first one wins.
    """
    zip_archive = Node(
        "application/zip",
        "zip",
        m.is_zip,
        (
            Node("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "xlsx", m.is_xlsx),
            Node("application/vnd.openxmlformats-officedocument.wordprocessingml.document", "docx", m.is_docx),
            Node("application/vnd.openxmlformats-officedocument.presentationml.presentation", "pptx", m.is_pptx),
            Node("application/epub+zip", "epub", m.is_epub),
            Node(
                "application/jar",
                "jar",
                m.is_jar,
                (_leaf("application/vnd.android.package-archive", "apk"),),
            ),
        ),
    )

    xml = Node(
        "text/xml; charset=utf-8",
        "xml",
        m.is_xml,
        (
            _leaf("image/svg+xml", "svg"),
            _leaf("model/x3d+xml", "x3d"),
            _leaf("application/vnd.google-earth.kml+xml", "kml"),
            _leaf("model/vnd.collada+xml", "dae"),
            _leaf("application/gml+xml", "gml"),
            _leaf("application/gpx+xml", "gpx"),
        ),
    )

    text = Node(
        "text/plain",
        "txt",
        m.is_text,
        (
            Node("text/html; charset=utf-8", "html", m.is_html),
            xml,
            Node("text/x-php; charset=utf-8", "php", m.is_php),
            Node("application/javascript", "js", m.is_js),
            Node("text/x-lua", "lua", m.is_lua),
            Node("text/x-perl", "pl", m.is_perl),
            Node("application/x-python", "py", m.is_python),
            Node(
                "application/json",
                "json",
                functools.partial(m.is_json, limit=read_limit),
            ),
            Node("text/rtf", "rtf", m.is_rtf),
        ),
    )

    return Node(
        OCTET_STREAM,
        "",
        m.always,
        (
            Node("application/x-7z-compressed", "7z", m.is_seven_z),
            zip_archive,
            Node("application/pdf", "pdf", m.is_pdf),
            Node("application/postscript", "ps", m.is_ps),
            Node("application/x-photoshop", "psd", m.is_psd),
            Node("application/ogg", "ogg", m.is_ogg),
            # images
            Node("image/png", "png", m.is_png),
            Node("image/jpeg", "jpg", m.is_jpg),
            Node("image/gif", "gif", m.is_gif),
            Node("image/webp", "webp", m.is_webp),
            Node("image/tiff", "tiff", m.is_tiff),
            Node("image/bmp", "bmp", m.is_bmp),
            Node("image/x-icon", "ico", m.is_ico),
            # audio
            Node("audio/mpeg", "mp3", m.is_mp3),
            Node("audio/flac", "flac", m.is_flac),
            Node("audio/midi", "midi", m.is_midi),
            Node("audio/ape", "ape", m.is_ape),
            Node("audio/musepack", "mpc", m.is_musepack),
            Node("audio/amr", "amr", m.is_amr),
            Node("audio/wav", "wav", m.is_wav),
            Node("audio/aiff", "aiff", m.is_aiff),
            Node("audio/basic", "au", m.is_au),
            # video
            Node("video/mpeg", "mpeg", m.is_mpeg),
            Node("video/quicktime", "mov", m.is_quicktime),
            Node("video/mp4", "mp4", m.is_mp4),
            Node("video/webm", "webm", m.is_webm),
            Node("video/3gp", "3gp", m.is_3gp),
            Node("video/x-msvideo", "avi", m.is_avi),
            Node("video/x-flv", "flv", m.is_flv),
            Node("video/x-matroska", "mkv", m.is_mkv),
            text,
            Node("application/gzip", "gz", m.is_gzip),
        ),
    )


@functools.lru_cache(maxsize=8)
def default_tree(read_limit: int = READ_LIMIT) -> Node:
    """The shared default tree for ``read_limit``, built on first use."""
    return build_tree(read_limit)


class Detector:
    """Classify content by sniffing a bounded prefix.

    Attributes:
        tree: Root of the matcher tree
        read_limit: Number of leading bytes inspected
    """

    def __init__(self, tree: Optional[Node] = None, read_limit: int = READ_LIMIT):
        self.tree = tree if tree is not None else default_tree(read_limit)
        self.read_limit = read_limit

    @property
    def fallback(self) -> Classification:
        return self.tree.mime, self.tree.extension

    def detect(self, data: bytes) -> Classification:
        """Classify an in-memory prefix. Only ``read_limit`` bytes are inspected."""
        node = self.tree.match(bytes(data[: self.read_limit]))
        return node.mime, node.extension

    def detect_reader(self, stream: BinaryIO, path: Optional[str] = None) -> Classification:
        """Classify the first ``read_limit`` bytes of a binary stream.

        Raises:
            DetectionError: If reading fails; carries the root classification
        """
        try:
            data = stream.read(self.read_limit)
        except OSError as e:
            mime, extension = self.fallback
            raise DetectionError(f"cannot read content: {e}", mime, extension, path) from e
        return self.detect(data or b"")

    def detect_file(self, path: str) -> Classification:
        """Open ``path`` and classify its leading bytes.

        Raises:
            DetectionError: If the file cannot be opened or read
        """
        try:
            with open(path, "rb") as stream:
                return self.detect_reader(stream, path)
        except OSError as e:
            mime, extension = self.fallback
            raise DetectionError(
                f"cannot open {path}: {e.strerror or e}", mime, extension, path
            ) from e

    def detect_file_safe(self, path: str) -> Classification:
        """Like ``detect_file`` but answers the root classification on error."""
        try:
            return self.detect_file(path)
        except DetectionError as e:
            return e.mime, e.extension


_default_detector: Optional[Detector] = None


def get_detector() -> Detector:
    """Shared detector over the default tree."""
    global _default_detector
    if _default_detector is None:
        _default_detector = Detector()
    return _default_detector


def detect(data: bytes) -> Classification:
    return get_detector().detect(data)


def detect_file(path: str) -> Classification:
    return get_detector().detect_file(path)
