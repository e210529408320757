"""
dirlens Mime: Textual signatures.

Three kinds of signature recognise text formats and scripts:

- MarkupSig: case-insensitive tag at the start of the input, followed by a
  space or ``>`` (``<HTML>``, ``<?xml ``)
- CiSig: case-insensitive prefix with no terminator check (``<?php``)
- ShebangSig: first line is ``#!`` followed by exactly this interpreter
"""

from typing import Iterable

WHITESPACE = b"\t\n\x0c\r "


def trim_lws(data: bytes) -> bytes:
    """Trim whitespace from the beginning of ``data``."""
    return data.lstrip(WHITESPACE)


def trim_rws(data: bytes) -> bytes:
    """Trim whitespace from the end of ``data``."""
    return data.rstrip(WHITESPACE)


def first_line(data: bytes) -> bytes:
    end = data.find(b"\n")
    return data if end < 0 else data[:end]


def _ci_prefix(data: bytes, sig: bytes) -> bool:
    """Compare ``data`` against an upper-case signature, ignoring case of letters."""
    for sig_byte, data_byte in zip(sig, data):
        if 0x41 <= sig_byte <= 0x5A:
            data_byte &= 0xDF
        if sig_byte != data_byte:
            return False
    return True


class MarkupSig:
    __slots__ = ("sig",)

    def __init__(self, sig: bytes):
        self.sig = sig

    def detect(self, data: bytes) -> bool:
        data = trim_lws(data)
        if len(data) < len(self.sig) + 1:
            return False
        if not _ci_prefix(data, self.sig):
            return False
        return data[len(self.sig)] in b" >"

    def __repr__(self) -> str:
        return f"MarkupSig({self.sig!r})"


class CiSig:
    __slots__ = ("sig",)

    def __init__(self, sig: bytes):
        self.sig = sig

    def detect(self, data: bytes) -> bool:
        data = trim_lws(data)
        if len(data) < len(self.sig) + 1:
            return False
        return _ci_prefix(data, self.sig)

    def __repr__(self) -> str:
        return f"CiSig({self.sig!r})"


class ShebangSig:
    __slots__ = ("interpreter",)

    def __init__(self, interpreter: bytes):
        self.interpreter = interpreter

    def detect(self, data: bytes) -> bool:
        line = first_line(data)
        if len(line) < len(self.interpreter) + 2:
            return False
        if not line.startswith(b"#!"):
            return False
        return trim_lws(trim_rws(line[2:])) == self.interpreter

    def __repr__(self) -> str:
        return f"ShebangSig({self.interpreter!r})"


def detect_any(data: bytes, sigs: Iterable) -> bool:
    return any(sig.detect(data) for sig in sigs)


HTML_SIGS = tuple(
    MarkupSig(tag)
    for tag in (
        b"<!DOCTYPE HTML",
        b"<HTML",
        b"<HEAD",
        b"<SCRIPT",
        b"<IFRAME",
        b"<H1",
        b"<DIV",
        b"<FONT",
        b"<TABLE",
        b"<A",
        b"<STYLE",
        b"<TITLE",
        b"<B",
        b"<BODY",
        b"<BR",
        b"<P",
        b"<!--",
    )
)

XML_SIGS = (MarkupSig(b"<?XML"),)

PHP_SIGS = (
    CiSig(b"<?PHP"),
    CiSig(b"<?\n"),
    CiSig(b"<?\r"),
    CiSig(b"<? "),
    ShebangSig(b"/usr/local/bin/php"),
    ShebangSig(b"/usr/bin/php"),
    ShebangSig(b"/usr/bin/env php"),
)

JS_SIGS = (
    ShebangSig(b"/bin/node"),
    ShebangSig(b"/usr/bin/node"),
    ShebangSig(b"/bin/nodejs"),
    ShebangSig(b"/usr/bin/nodejs"),
    ShebangSig(b"/usr/bin/env node"),
    ShebangSig(b"/usr/bin/env nodejs"),
)

LUA_SIGS = (
    ShebangSig(b"/usr/bin/lua"),
    ShebangSig(b"/usr/local/bin/lua"),
    ShebangSig(b"/usr/bin/env lua"),
)

PERL_SIGS = (
    ShebangSig(b"/usr/bin/perl"),
    ShebangSig(b"/usr/bin/env perl"),
)

PYTHON_SIGS = (
    ShebangSig(b"/usr/bin/python"),
    ShebangSig(b"/usr/local/bin/python"),
    ShebangSig(b"/usr/bin/env python"),
    ShebangSig(b"/usr/bin/python3"),
    ShebangSig(b"/usr/local/bin/python3"),
    ShebangSig(b"/usr/bin/env python3"),
)
