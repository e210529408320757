"""
dirlens Mime: Content predicates.

Every predicate takes the inspected byte prefix (at most ``READ_LIMIT``
bytes) and answers whether it belongs to one content type. Predicates never
raise on short input; they simply do not match.
"""

import re
import struct

from dirlens.core.constants import Limits
from dirlens.mime import signatures
from dirlens.mime.signatures import detect_any, trim_lws


def always(data: bytes) -> bool:
    return True


def never(data: bytes) -> bool:
    return False


# Archives and documents


def is_zip(data: bytes) -> bool:
    return (
        len(data) > 3
        and data[0] == 0x50
        and data[1] == 0x4B
        and data[2] in (0x3, 0x5, 0x7)
        and data[3] in (0x4, 0x6, 0x8)
    )


def is_seven_z(data: bytes) -> bool:
    return data[:6] == b"\x37\x7A\xBC\xAF\x27\x1C"


def is_gzip(data: bytes) -> bool:
    return data[:2] == b"\x1f\x8b"


def is_epub(data: bytes) -> bool:
    return len(data) >= 58 and data[30:58] == b"mimetypeapplication/epub+zip"


def is_jar(data: bytes) -> bool:
    return b"META-INF/MANIFEST.MF" in data


def is_xlsx(data: bytes) -> bool:
    return b"xl/" in data


def is_docx(data: bytes) -> bool:
    return b"word/" in data


def is_pptx(data: bytes) -> bool:
    return b"ppt/" in data


def is_pdf(data: bytes) -> bool:
    return data[:4] == b"%PDF"


def is_ps(data: bytes) -> bool:
    return data.startswith(b"%!PS-Adobe-")


def is_psd(data: bytes) -> bool:
    return data.startswith(b"8BPS")


def is_ogg(data: bytes) -> bool:
    return data[:5] == b"OggS\x00"


def is_rtf(data: bytes) -> bool:
    return data[:6] == b"{\\rtf1"


# Images


def is_png(data: bytes) -> bool:
    return data[:8] == b"\x89PNG\r\n\x1a\n"


def is_jpg(data: bytes) -> bool:
    return data[:3] == b"\xff\xd8\xff"


def is_gif(data: bytes) -> bool:
    return data.startswith(b"GIF87a") or data.startswith(b"GIF89a")


def is_webp(data: bytes) -> bool:
    return len(data) > 11 and data[:4] == b"RIFF" and data[8:12] == b"WEBP"


def is_tiff(data: bytes) -> bool:
    return data[:4] in (b"II*\x00", b"MM\x00*")


def is_bmp(data: bytes) -> bool:
    return data[:2] == b"BM"


def is_ico(data: bytes) -> bool:
    return data[:4] == b"\x00\x00\x01\x00"


# Audio


def is_mp3(data: bytes) -> bool:
    return data.startswith(b"ID3")


def is_flac(data: bytes) -> bool:
    return data.startswith(b"fLaC\x00\x00\x00\x22")


def is_midi(data: bytes) -> bool:
    return data.startswith(b"MThd")


def is_ape(data: bytes) -> bool:
    return data.startswith(
        b"MAC \x96\x0f\x00\x00\x34\x00\x00\x00\x18\x00\x00\x00\x90\xe3"
    )


def is_musepack(data: bytes) -> bool:
    return data[:4] == b"MPCK"


def is_amr(data: bytes) -> bool:
    return data[:5] == b"#!AMR"


def is_wav(data: bytes) -> bool:
    return data[:4] == b"RIFF" and data[8:12] == b"WAVE"


def is_aiff(data: bytes) -> bool:
    return data[:4] == b"FORM" and data[8:12] == b"AIFF"


def is_au(data: bytes) -> bool:
    return data[:4] == b".snd"


# Video


def is_mpeg(data: bytes) -> bool:
    return len(data) > 3 and data[:3] == b"\x00\x00\x01" and 0xB0 <= data[3] <= 0xBF


def is_quicktime(data: bytes) -> bool:
    return len(data) > 12 and (data[4:12] == b"ftypqt  " or data[4:8] == b"moov")


def is_mp4(data: bytes) -> bool:
    """ISO base media file with an ``mp4`` brand in its ``ftyp`` box.

    The leading big-endian box size must be a multiple of 4 and fit in the
    input; brands are scanned in 4-byte steps, skipping the minor version.
    """
    if len(data) < 12:
        return False
    (box_size,) = struct.unpack_from(">I", data)
    if box_size % 4 != 0 or len(data) < box_size:
        return False
    if data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        if start == 12:
            continue
        if data[start : start + 3] == b"mp4":
            return True
    return False


def _matroska_doctype(data: bytes, doctype: bytes) -> bool:
    if not data.startswith(b"\x1a\x45\xdf\xa3"):
        return False
    index = data[: Limits.MATROSKA_SEARCH_LIMIT].find(b"\x42\x82")
    if index <= 0:
        return False
    # doctype follows the element id and one size byte
    return data[index + 3 :].startswith(doctype)


def is_webm(data: bytes) -> bool:
    return _matroska_doctype(data, b"webm")


def is_mkv(data: bytes) -> bool:
    return _matroska_doctype(data, b"matroska")


def is_3gp(data: bytes) -> bool:
    return len(data) > 11 and data[4:11] == b"ftyp3gp"


def is_avi(data: bytes) -> bool:
    return len(data) > 16 and data[:4] == b"RIFF" and data[8:16] == b"AVI LIST"


def is_flv(data: bytes) -> bool:
    return data.startswith(b"FLV\x01")


# Text


def is_text(data: bytes) -> bool:
    """No control bytes other than whitespace and ESC after leading whitespace."""
    for byte in trim_lws(data):
        if (
            byte <= 0x08
            or byte == 0x0B
            or 0x0E <= byte <= 0x1A
            or 0x1C <= byte <= 0x1F
        ):
            return False
    return True


def is_html(data: bytes) -> bool:
    return detect_any(data, signatures.HTML_SIGS)


def is_xml(data: bytes) -> bool:
    return detect_any(data, signatures.XML_SIGS)


def is_php(data: bytes) -> bool:
    return detect_any(data, signatures.PHP_SIGS)


def is_js(data: bytes) -> bool:
    return detect_any(data, signatures.JS_SIGS)


def is_lua(data: bytes) -> bool:
    return detect_any(data, signatures.LUA_SIGS)


def is_perl(data: bytes) -> bool:
    return detect_any(data, signatures.PERL_SIGS)


def is_python(data: bytes) -> bool:
    return detect_any(data, signatures.PYTHON_SIGS)


# JSON

_COMPLETE = "complete"
_PARTIAL = "partial"
_INVALID = "invalid"

_JSON_WS = b" \t\n\r"
_NUMBER = re.compile(rb"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_NUMBER_CHARS = frozenset(b"+-.0123456789eE")
_LITERALS = (b"true", b"false", b"null")
_ESCAPES = frozenset(b'"\\/bfnrt')
_HEX = frozenset(b"0123456789abcdefABCDEF")

# Scanner states
_VALUE = 0  # a value is required
_FIRST_ITEM = 1  # after "[": a value or "]"
_FIRST_KEY = 2  # after "{": a key or "}"
_KEY = 3  # after "," in an object
_COLON = 4
_AFTER_VALUE = 5  # "," or the closing bracket of the current container
_DONE = 6


def _scan_string(data: bytes, pos: int) -> int:
    """Return the offset past the closing quote, -1 if truncated, -2 if invalid."""
    pos += 1
    end = len(data)
    while pos < end:
        byte = data[pos]
        if byte == 0x22:
            return pos + 1
        if byte < 0x20:
            return -2
        if byte == 0x5C:
            if pos + 1 >= end:
                return -1
            escape = data[pos + 1]
            if escape == 0x75:
                digits = data[pos + 2 : pos + 6]
                if not all(d in _HEX for d in digits):
                    return -2
                if len(digits) < 4:
                    return -1
                pos += 6
                continue
            if escape not in _ESCAPES:
                return -2
            pos += 2
            continue
        pos += 1
    return -1


def scan_json(data: bytes) -> str:
    """Check ``data`` against the JSON grammar.

    Returns ``"complete"`` for one whole document (trailing whitespace
    allowed), ``"partial"`` when the input is a valid prefix that ends
    mid-document, and ``"invalid"`` otherwise.
    """
    stack = []
    state = _VALUE
    pos = 0
    end = len(data)

    while True:
        while pos < end and data[pos] in _JSON_WS:
            pos += 1
        if pos >= end:
            return _COMPLETE if state == _DONE else _PARTIAL
        byte = data[pos]

        if state == _DONE:
            return _INVALID

        if state == _COLON:
            if byte != 0x3A:
                return _INVALID
            pos += 1
            state = _VALUE
            continue

        if state == _AFTER_VALUE:
            if byte == 0x2C:
                pos += 1
                state = _KEY if stack[-1] == "{" else _VALUE
            elif (byte == 0x7D and stack[-1] == "{") or (byte == 0x5D and stack[-1] == "["):
                pos += 1
                stack.pop()
                state = _AFTER_VALUE if stack else _DONE
            else:
                return _INVALID
            continue

        if state in (_FIRST_KEY, _KEY):
            if byte == 0x7D and state == _FIRST_KEY:
                pos += 1
                stack.pop()
                state = _AFTER_VALUE if stack else _DONE
                continue
            if byte != 0x22:
                return _INVALID
            pos = _scan_string(data, pos)
            if pos == -1:
                return _PARTIAL
            if pos == -2:
                return _INVALID
            state = _COLON
            continue

        # _VALUE or _FIRST_ITEM
        if byte == 0x5D and state == _FIRST_ITEM:
            pos += 1
            stack.pop()
            state = _AFTER_VALUE if stack else _DONE
            continue
        if byte == 0x7B:
            pos += 1
            stack.append("{")
            state = _FIRST_KEY
            continue
        if byte == 0x5B:
            pos += 1
            stack.append("[")
            state = _FIRST_ITEM
            continue

        if byte == 0x22:
            pos = _scan_string(data, pos)
            if pos == -1:
                return _PARTIAL
            if pos == -2:
                return _INVALID
        elif byte in _NUMBER_CHARS:
            stop = pos
            while stop < end and data[stop] in _NUMBER_CHARS:
                stop += 1
            token = data[pos:stop]
            if stop == end:
                if _NUMBER.fullmatch(token) and not stack:
                    return _COMPLETE
                if _NUMBER.fullmatch(token) or _NUMBER.fullmatch(token + b"0"):
                    return _PARTIAL
                return _INVALID
            if not _NUMBER.fullmatch(token):
                return _INVALID
            pos = stop
        else:
            for literal in _LITERALS:
                if data.startswith(literal, pos):
                    pos += len(literal)
                    break
                if literal.startswith(data[pos:]):
                    return _PARTIAL
            else:
                return _INVALID

        state = _AFTER_VALUE if stack else _DONE


def is_json(data: bytes, limit: int = Limits.READ_LIMIT) -> bool:
    """A JSON object or array.

    Input shorter than ``limit`` must hold the whole document; input
    cut at the limit only has to be a valid prefix of one.
    """
    if trim_lws(data)[:1] not in (b"{", b"["):
        return False
    result = scan_json(data)
    if len(data) < limit:
        return result == _COMPLETE
    return result != _INVALID
